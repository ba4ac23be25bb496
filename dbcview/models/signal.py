"""Signal model: one bit-field inside a CAN message payload."""

from enum import Enum

from pydantic import BaseModel


class ByteOrder(str, Enum):
    """Signal byte order, from the ``@0`` / ``@1`` flag of an SG_ record."""

    LITTLE_ENDIAN = "LittleEndian"  # @1 (Intel)
    BIG_ENDIAN = "BigEndian"  # @0 (Motorola)


class Signal(BaseModel):
    """Parsed SG_ record."""

    name: str
    start_bit: int
    length: int  # Width in bits
    byte_order: ByteOrder
    is_signed: bool  # "-" sign flag

    # Linear conversion: physical = raw * scale + offset
    scale: float = 1.0
    offset: float = 0.0
    min: float = 0.0
    max: float = 0.0

    # Filled in later by CM_ SG_ / VAL_ records (None until seen)
    comment: str | None = None
    value_descriptions: dict[int, str] | None = None

    @property
    def summary(self) -> str:
        """One-line summary for terminal output."""
        sign = "signed" if self.is_signed else "unsigned"
        return (
            f"{self.name:<24} {self.start_bit:>3}|{self.length:<3} "
            f"{self.byte_order.value:<12} {sign:<8} "
            f"x{self.scale:g} +{self.offset:g} [{self.min:g}..{self.max:g}]"
        )

    def describe_value(self, raw: int) -> str | None:
        """Return the value-table label for ``raw``, if any."""
        if self.value_descriptions is None:
            return None
        return self.value_descriptions.get(raw)
