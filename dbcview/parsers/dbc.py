"""DBC text → Network model parser.

Single forward pass over the lines of a DBC file. Exactly one message is open
for signal attachment at a time: the most recently started BO_. Comment and
value-table records attach to messages/signals already seen, including the
open one.

Line classification (first match wins):
  1. ``BO_``      start a message (flushes the open one)
  2. ``SG_``      add a signal to the open message (leading whitespace ok)
  3. ``CM_ BO_``  message comment
  4. ``CM_ SG_``  signal comment
  5. ``VAL_``     signal value descriptions

Malformed input never raises: bad lines are skipped, bad numeric fields take
their default, and references to unknown messages/signals are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dbcview.models.message import Message
from dbcview.models.network import Network
from dbcview.models.signal import ByteOrder, Signal
from dbcview.parsers.patterns import (
    MESSAGE_COMMENT_PREFIX,
    MESSAGE_COMMENT_RE,
    MESSAGE_MIN_TOKENS,
    MESSAGE_PREFIX,
    SIGNAL_COMMENT_PREFIX,
    SIGNAL_COMMENT_RE,
    SIGNAL_PREFIX,
    SIGNAL_RE,
    UINT8_BITS,
    VALUE_PAIR_RE,
    VALUE_TABLE_PREFIX,
    VALUE_TABLE_RE,
    parse_float,
    parse_uint,
)
from dbcview.settings import ParserSettings

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_ID = 0
DEFAULT_BIT = 0
DEFAULT_OFFSET = 0.0
DEFAULT_LIMIT = 0.0


@dataclass
class _ParseState:
    """Accumulator threaded through one parse call."""

    messages: list[Message] = field(default_factory=list)
    current: Message | None = None
    skipped: int = 0

    def flush(self) -> None:
        """Move the open message (if any) to the output list."""
        if self.current is not None:
            self.messages.append(self.current)
            self.current = None

    def find_message(self, message_id: int) -> Message | None:
        """First message with ``message_id``: flushed ones, then the open one."""
        for msg in self.messages:
            if msg.id == message_id:
                return msg
        if self.current is not None and self.current.id == message_id:
            return self.current
        return None

    def find_signal(self, message_id: int, name: str) -> Signal | None:
        msg = self.find_message(message_id)
        if msg is None:
            return None
        return msg.get_signal(name)


def _iter_lines(text: str):
    """Yield ``(line_number, line)`` split on ``\\n`` with any trailing ``\\r`` removed."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for lineno, line in enumerate(lines, start=1):
        yield lineno, line.removesuffix("\r")


def _or_default(value: int | float | None, default: int | float) -> int | float:
    return default if value is None else value


def _parse_message(line: str, settings: ParserSettings) -> Message | None:
    parts = line.split()
    if len(parts) < MESSAGE_MIN_TOKENS:
        return None

    return Message(
        id=_or_default(parse_uint(parts[1]), DEFAULT_MESSAGE_ID),
        name=parts[2].rstrip(":"),
        dlc=_or_default(parse_uint(parts[3], UINT8_BITS), settings.default_dlc),
        node=parts[4],
    )


def _parse_signal(line: str, settings: ParserSettings) -> Signal | None:
    m = SIGNAL_RE.search(line)
    if not m:
        return None

    return Signal(
        name=m.group("name"),
        start_bit=_or_default(parse_uint(m.group("start")), DEFAULT_BIT),
        length=_or_default(parse_uint(m.group("length")), DEFAULT_BIT),
        byte_order=ByteOrder.LITTLE_ENDIAN if m.group("endian") == "1" else ByteOrder.BIG_ENDIAN,
        is_signed=m.group("sign") == "-",
        scale=_or_default(parse_float(m.group("scale")), settings.default_scale),
        offset=_or_default(parse_float(m.group("offset")), DEFAULT_OFFSET),
        min=_or_default(parse_float(m.group("min")), DEFAULT_LIMIT),
        max=_or_default(parse_float(m.group("max")), DEFAULT_LIMIT),
    )


def _parse_value_pairs(text: str) -> dict[int, str]:
    """Collect ``<int> "<label>"`` pairs left to right; later keys overwrite earlier ones."""
    values: dict[int, str] = {}
    for m in VALUE_PAIR_RE.finditer(text):
        raw = parse_uint(m.group("value"))
        if raw is None:
            continue
        values[raw] = m.group("label")
    return values


def _handle_message_comment(line: str, lineno: int, state: _ParseState) -> None:
    m = MESSAGE_COMMENT_RE.search(line)
    if not m:
        state.skipped += 1
        logger.debug("Line %d: malformed message comment, skipped", lineno)
        return

    msg_id = parse_uint(m.group("id"))
    msg = None if msg_id is None else state.find_message(msg_id)
    if msg is None:
        logger.debug("Line %d: comment for unknown message %s dropped", lineno, m.group("id"))
        return
    msg.comment = m.group("text")


def _handle_signal_comment(line: str, lineno: int, state: _ParseState) -> None:
    m = SIGNAL_COMMENT_RE.search(line)
    if not m:
        state.skipped += 1
        logger.debug("Line %d: malformed signal comment, skipped", lineno)
        return

    msg_id = parse_uint(m.group("id"))
    signal = None if msg_id is None else state.find_signal(msg_id, m.group("signal"))
    if signal is None:
        logger.debug(
            "Line %d: comment for unknown signal %s/%s dropped",
            lineno,
            m.group("id"),
            m.group("signal"),
        )
        return
    signal.comment = m.group("text")


def _handle_value_table(line: str, lineno: int, state: _ParseState) -> None:
    m = VALUE_TABLE_RE.search(line)
    if not m:
        state.skipped += 1
        logger.debug("Line %d: malformed value table, skipped", lineno)
        return

    msg_id = parse_uint(m.group("id"))
    signal = None if msg_id is None else state.find_signal(msg_id, m.group("signal"))
    if signal is None:
        logger.debug(
            "Line %d: value table for unknown signal %s/%s dropped",
            lineno,
            m.group("id"),
            m.group("signal"),
        )
        return
    # Replaces any earlier table for this signal, no merge
    signal.value_descriptions = _parse_value_pairs(m.group("pairs"))


def parse_dbc(text: str, settings: ParserSettings | None = None) -> Network:
    """Parse DBC source text into a Network.

    This function never raises for malformed input:
    - BO_ lines with fewer than 5 tokens are skipped (and still close the
      previously open message)
    - SG_ lines outside a message, or not matching the signal pattern, are skipped
    - non-numeric fields take their documented default
    - CM_/VAL_ records for unknown messages or signals are dropped

    Args:
        text: Complete DBC file contents.
        settings: Parser fallbacks. Defaults to ``ParserSettings()``.

    Returns:
        Network with messages in first-appearance order.
    """
    settings = settings or ParserSettings()
    state = _ParseState()

    for lineno, line in _iter_lines(text):
        if line.startswith(MESSAGE_PREFIX):
            state.flush()
            state.current = _parse_message(line, settings)
            if state.current is None:
                state.skipped += 1
                logger.debug("Line %d: BO_ with fewer than %d tokens, skipped", lineno, MESSAGE_MIN_TOKENS)

        elif line.lstrip().startswith(SIGNAL_PREFIX):
            if state.current is None:
                state.skipped += 1
                logger.debug("Line %d: SG_ outside of a message, skipped", lineno)
                continue
            signal = _parse_signal(line.lstrip(), settings)
            if signal is None:
                state.skipped += 1
                logger.debug("Line %d: malformed SG_, skipped", lineno)
                continue
            state.current.signals.append(signal)

        elif line.startswith(MESSAGE_COMMENT_PREFIX):
            _handle_message_comment(line, lineno, state)

        elif line.startswith(SIGNAL_COMMENT_PREFIX):
            _handle_signal_comment(line, lineno, state)

        elif line.startswith(VALUE_TABLE_PREFIX):
            _handle_value_table(line, lineno, state)

    # The last message has no following BO_ to close it
    state.flush()

    network = Network(messages=state.messages)
    logger.info(
        "DBC: parsed %d messages, %d signals (%d lines skipped)",
        len(network.messages),
        network.signal_count,
        state.skipped,
    )
    return network
