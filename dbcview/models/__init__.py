"""Pydantic models for the parsed DBC network."""

from dbcview.models.signal import ByteOrder, Signal
from dbcview.models.message import Message
from dbcview.models.network import Network

__all__ = ["ByteOrder", "Signal", "Message", "Network"]
