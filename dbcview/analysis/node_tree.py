"""Node tree: groups a parsed network by transmitting node for browsing.

The host application shows a DBC as an expandable tree::

    ECU
      EngineData
        RPM
        Temp
    Gateway
      ...

and lets the user filter it with a free-text query and reference a signal by
its qualified path (``ECU.EngineData.RPM``). This module builds that tree and
runs the query; it never modifies the Network it reads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dbcview.models.message import Message
from dbcview.models.network import Network
from dbcview.models.signal import Signal
from dbcview.settings import SearchSettings

logger = logging.getLogger(__name__)


@dataclass
class SearchHit:
    """One match in the node tree."""

    node: str
    message: str | None  # None for a node-level hit
    signal: str | None  # None for a node- or message-level hit
    path: str
    matched_on: str  # "node", "message", "name", "comment" or "value_description"

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        return {
            "node": self.node,
            "message": self.message,
            "signal": self.signal,
            "path": self.path,
            "matched_on": self.matched_on,
        }


def group_by_node(network: Network) -> dict[str, dict[str, Message]]:
    """Group messages under their transmitting node.

    Nodes appear in first-appearance order, messages in source order within
    each node. Messages are keyed by name, so a repeated name under the same
    node shows only the later message.
    """
    tree: dict[str, dict[str, Message]] = {}
    for msg in network.messages:
        tree.setdefault(msg.node, {})[msg.name] = msg
    return tree


def signal_path(
    node: str,
    message: str | None = None,
    signal: str | None = None,
    separator: str = ".",
) -> str:
    """Qualified name such as ``Node.Message.Signal``; missing parts are omitted."""
    return separator.join(part for part in (node, message, signal) if part is not None)


def _signal_match(signal: Signal, matches, settings: SearchSettings) -> str | None:
    """Return what a signal matched on (most specific first), or None."""
    if matches(signal.name):
        return "name"
    if signal.comment is not None and matches(signal.comment):
        return "comment"
    if settings.match_value_descriptions and signal.value_descriptions:
        if any(matches(label) for label in signal.value_descriptions.values()):
            return "value_description"
    return None


def search_network(
    network: Network,
    query: str,
    settings: SearchSettings | None = None,
) -> list[SearchHit]:
    """Find nodes, messages and signals whose text contains ``query``.

    - a node matches on its name
    - a message matches on its name
    - a signal matches on its name, its comment, or (if enabled) any
      value-description label

    Matching is a substring test, case-insensitive unless
    ``settings.case_sensitive``. An empty query matches everything.

    Returns:
        Hits in tree order (node, then its messages, then their signals).
    """
    settings = settings or SearchSettings()
    sep = settings.path_separator

    if settings.case_sensitive:
        def matches(text: str) -> bool:
            return query in text
    else:
        needle = query.casefold()

        def matches(text: str) -> bool:
            return needle in text.casefold()

    hits: list[SearchHit] = []
    for node, messages in group_by_node(network).items():
        if matches(node):
            hits.append(SearchHit(node, None, None, signal_path(node, separator=sep), "node"))

        for msg_name, msg in messages.items():
            if matches(msg_name):
                hits.append(
                    SearchHit(node, msg_name, None, signal_path(node, msg_name, separator=sep), "message")
                )
            for signal in msg.signals:
                matched_on = _signal_match(signal, matches, settings)
                if matched_on is None:
                    continue
                hits.append(
                    SearchHit(
                        node,
                        msg_name,
                        signal.name,
                        signal_path(node, msg_name, signal.name, sep),
                        matched_on,
                    )
                )

    logger.debug("Search %r: %d hits", query, len(hits))
    return hits


def resolve_path(
    network: Network,
    path: str,
    settings: SearchSettings | None = None,
) -> Signal | None:
    """Look up a signal by its ``Node.Message.Signal`` path, or return None."""
    settings = settings or SearchSettings()
    parts = path.split(settings.path_separator)
    if len(parts) != 3:
        return None
    node, msg_name, sig_name = parts
    msg = group_by_node(network).get(node, {}).get(msg_name)
    if msg is None:
        return None
    return msg.get_signal(sig_name)
