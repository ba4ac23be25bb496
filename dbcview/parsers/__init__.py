"""DBC text parser modules."""

from dbcview.parsers.dbc import parse_dbc

__all__ = ["parse_dbc"]
