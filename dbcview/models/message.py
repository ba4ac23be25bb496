"""Message model: one BO_ frame definition and the signals it carries."""

from pydantic import BaseModel, Field, computed_field

from dbcview.models.signal import Signal

# J1939-style 29-bit identifier layout
PGN_SHIFT = 8
PGN_MASK = 0x3FFFF
SA_MASK = 0xFF
PRIORITY_SHIFT = 26
PRIORITY_MASK = 0x7


class Message(BaseModel):
    """Parsed BO_ record with its SG_ children."""

    id: int  # Raw identifier as written (may carry extended-frame bits)
    name: str
    dlc: int
    node: str  # Transmitting node

    signals: list[Signal] = Field(default_factory=list)

    # Filled in later by a CM_ BO_ record (None until seen)
    comment: str | None = None

    # Derived from id on every access, never stored. Applied even to
    # 11-bit identifiers, where the values carry no meaning.
    @computed_field
    @property
    def pgn(self) -> int:
        return (self.id >> PGN_SHIFT) & PGN_MASK

    @computed_field
    @property
    def sa(self) -> int:
        return self.id & SA_MASK

    @computed_field
    @property
    def priority(self) -> int:
        return (self.id >> PRIORITY_SHIFT) & PRIORITY_MASK

    @property
    def hex_id(self) -> str:
        return f"0x{self.id:08X}"

    @property
    def summary(self) -> str:
        """One-line summary for terminal output."""
        return (
            f"{self.hex_id}  {self.name:<24} {self.node:<16} "
            f"DLC={self.dlc:<2} PGN={self.pgn:<6} SA={self.sa:<3} "
            f"P={self.priority}  {len(self.signals)} signals"
        )

    def get_signal(self, name: str) -> Signal | None:
        """Return the first signal named ``name`` (exact match), or None."""
        for signal in self.signals:
            if signal.name == name:
                return signal
        return None
