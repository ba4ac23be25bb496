"""Network model: the root result of a DBC parse."""

from typing import Any

from pydantic import BaseModel, Field

from dbcview.models.message import Message


class Network(BaseModel):
    """All messages of a DBC file, in first-appearance order.

    Duplicate message ids are kept as written; lookups resolve to the first.
    """

    messages: list[Message] = Field(default_factory=list)

    @property
    def signal_count(self) -> int:
        return sum(len(m.signals) for m in self.messages)

    @property
    def nodes(self) -> list[str]:
        """Transmitting node names, in first-appearance order."""
        seen: dict[str, None] = {}
        for msg in self.messages:
            seen.setdefault(msg.node, None)
        return list(seen)

    def get_message(self, message_id: int) -> Message | None:
        """Return the first message with ``message_id``, or None."""
        for msg in self.messages:
            if msg.id == message_id:
                return msg
        return None

    def get_message_by_name(self, name: str) -> Message | None:
        for msg in self.messages:
            if msg.name == name:
                return msg
        return None

    # --- Serialization boundary for host environments ---

    def to_dict(self) -> dict[str, Any]:
        """Field-labeled python data.

        Absent comments / value tables stay ``None``; value-description keys
        stay ``int``; derived pgn/sa/priority are included.
        """
        return self.model_dump(mode="python")

    def to_json(self, indent: int | None = None) -> str:
        """JSON text. Value-description keys become strings, as JSON requires."""
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Network":
        """Rebuild a network from :meth:`to_json` output.

        Raises:
            pydantic.ValidationError: If the JSON does not describe a network.
        """
        return cls.model_validate_json(data)
