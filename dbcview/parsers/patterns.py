"""Record patterns and tolerant numeric converters for DBC lines.

Record forms (whitespace-tolerant):
  BO_ <id> <name>: <dlc> <node>
   SG_ <name> : <start>|<length>@<0|1><+|-> (<scale>,<offset>) [<min>|<max>]
  CM_ BO_ <id> "<comment>";
  CM_ SG_ <id> <signal_name> "<comment>";
  VAL_ <id> <signal_name> <val> "<label>" <val> "<label>" ... ;

BO_ lines are split on whitespace rather than matched. The converters return
None on failure and leave the choice of default to the caller.
"""

from __future__ import annotations

import re

# Line prefixes, checked in this order by the parser
MESSAGE_PREFIX = "BO_"
SIGNAL_PREFIX = "SG_"  # after stripping leading whitespace
MESSAGE_COMMENT_PREFIX = "CM_ BO_"
SIGNAL_COMMENT_PREFIX = "CM_ SG_"
VALUE_TABLE_PREFIX = "VAL_"

# BO_ <id> <name>: <dlc> <node>
MESSAGE_MIN_TOKENS = 5

_NUM = r"[\d.\-]+"

SIGNAL_RE = re.compile(
    r"SG_\s+(?P<name>\w+)\s*:\s*"
    r"(?P<start>\d+)\|(?P<length>\d+)@(?P<endian>[01])(?P<sign>[+-])\s+"
    rf"\((?P<scale>{_NUM}),(?P<offset>{_NUM})\)\s+"
    rf"\[(?P<min>{_NUM})\|(?P<max>{_NUM})\]"
)

MESSAGE_COMMENT_RE = re.compile(r'CM_\s+BO_\s+(?P<id>\d+)\s+"(?P<text>[^"]+)"')

SIGNAL_COMMENT_RE = re.compile(
    r'CM_\s+SG_\s+(?P<id>\d+)\s+(?P<signal>\w+)\s+"(?P<text>[^"]+)"'
)

VALUE_TABLE_RE = re.compile(r"VAL_\s+(?P<id>\d+)\s+(?P<signal>\w+)\s+(?P<pairs>.*);")

VALUE_PAIR_RE = re.compile(r'(?P<value>\d+)\s+"(?P<label>[^"]+)"')

_UINT_RE = re.compile(r"\+?[0-9]+")

UINT8_BITS = 8
UINT32_BITS = 32


def parse_uint(token: str, bits: int = UINT32_BITS) -> int | None:
    """Parse an unsigned decimal integer that fits in ``bits`` bits.

    ASCII digits only, optional leading ``+``. Returns None otherwise.
    """
    if not _UINT_RE.fullmatch(token):
        return None
    # int() refuses very long digit strings; anything this long cannot fit anyway
    digits = token.lstrip("+").lstrip("0")
    if len(digits) > len(str((1 << bits) - 1)):
        return None
    value = int(digits or "0")
    if value >= 1 << bits:
        return None
    return value


def parse_float(token: str) -> float | None:
    """Parse a decimal float such as ``0.25``, ``-40`` or ``1.``.

    Returns None for anything ``float()`` rejects (``-``, ``1.2.3``, ``1-2``)
    and for non-ASCII input.
    """
    if not token.isascii():
        return None
    try:
        return float(token)
    except ValueError:
        return None
