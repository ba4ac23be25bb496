"""Network inspector: human-readable views of parsed messages and signals.

Three detail levels:
- summary: one line per message
- normal: message header plus one line per signal, with comments
- full: everything, including derived J1939 fields and value tables

``inspect_network_dict`` produces the structure handed to a host
environment (JSON-ready once passed through ``json.dumps``).
"""

from __future__ import annotations

import logging
from enum import Enum

from dbcview.models.message import Message
from dbcview.models.network import Network
from dbcview.models.signal import Signal

logger = logging.getLogger(__name__)


class DetailLevel(str, Enum):
    """Inspection detail levels."""

    SUMMARY = "summary"
    NORMAL = "normal"
    FULL = "full"


def inspect_message(message: Message, level: DetailLevel = DetailLevel.NORMAL) -> str:
    """Generate a human-readable inspection of one message.

    Args:
        message: The message to inspect.
        level: Detail level (summary, normal, full).

    Returns:
        Formatted string with message details.
    """
    if level == DetailLevel.SUMMARY:
        return message.summary
    elif level == DetailLevel.NORMAL:
        return _inspect_normal(message)
    else:
        return _inspect_full(message)


def inspect_signal(signal: Signal, level: DetailLevel = DetailLevel.NORMAL) -> str:
    """Render one signal; value tables only appear at FULL."""
    if level == DetailLevel.SUMMARY:
        return signal.summary

    lines = [f"  {signal.summary}"]
    if signal.comment is not None:
        lines.append(f"      comment: {signal.comment}")
    if level == DetailLevel.FULL and signal.value_descriptions is not None:
        if not signal.value_descriptions:
            lines.append("      values: (empty)")
        for raw, label in sorted(signal.value_descriptions.items()):
            lines.append(f"      {raw:>6} = {label}")
    return "\n".join(lines)


def _inspect_normal(message: Message) -> str:
    lines: list[str] = []
    lines.append(f"{message.name} ({message.hex_id})  from {message.node}, {message.dlc} bytes")
    if message.comment is not None:
        lines.append(f"  comment: {message.comment}")
    for signal in message.signals:
        lines.append(inspect_signal(signal, DetailLevel.NORMAL))
    return "\n".join(lines)


def _inspect_full(message: Message) -> str:
    lines: list[str] = []
    lines.append(f"Message {message.name}")
    lines.append(f"  ID:       {message.id} ({message.hex_id})")
    lines.append(f"  DLC:      {message.dlc}")
    lines.append(f"  Node:     {message.node}")
    lines.append(f"  PGN:      {message.pgn} (0x{message.pgn:05X})")
    lines.append(f"  SA:       {message.sa} (0x{message.sa:02X})")
    lines.append(f"  Priority: {message.priority}")
    lines.append(f"  Comment:  {message.comment if message.comment is not None else '-'}")
    lines.append(f"  Signals:  {len(message.signals)}")
    for signal in message.signals:
        lines.append(inspect_signal(signal, DetailLevel.FULL))
    return "\n".join(lines)


def inspect_network(network: Network, level: DetailLevel = DetailLevel.SUMMARY) -> str:
    """Render every message at ``level``, separated by blank lines above SUMMARY."""
    joiner = "\n" if level == DetailLevel.SUMMARY else "\n\n"
    return joiner.join(inspect_message(msg, level) for msg in network.messages)


def inspect_network_dict(network: Network) -> dict:
    """Network as field-labeled data plus a counts block.

    Optional fields stay ``None`` when absent and value-description keys stay
    ``int``; ``json.dumps`` turns those keys into strings.
    """
    result = network.to_dict()
    result["summary"] = {
        "message_count": len(network.messages),
        "signal_count": network.signal_count,
        "node_count": len(network.nodes),
        "nodes": network.nodes,
    }
    return result
