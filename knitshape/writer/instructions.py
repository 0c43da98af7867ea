"""Rendered instruction records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional


class InstructionType(str, Enum):
    CAST_ON = "cast_on"
    BIND_OFF = "bind_off"
    SHAPING_ROW = "shaping_row"
    PLAIN_ROW = "plain_row"
    SEPARATION = "separation"
    REPEAT = "repeat"
    SETUP_ROW = "setup_row"
    FINISHING = "finishing"


@dataclass(frozen=True)
class DetailedInstruction:
    """
    One rendered instruction.

    ``step`` is 1-based and unique within a render call. At most one of
    ``row_number`` / ``round_number`` is set; ranges and repeats carry the
    first row they cover. ``stitch_count_after`` is None when stitch counts
    are switched off, and for instructions that do not touch live stitches
    (section headers, assembly).

    ``metadata`` holds language-independent facts for downstream consumers:
    side of fabric, stitch delta, repeat counts, section names.
    """

    step: int
    row_number: Optional[int]
    round_number: Optional[int]
    instruction_type: InstructionType
    text: str
    stitch_count_after: Optional[int] = None
    metadata: MappingProxyType[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if self.step < 1:
            raise ValueError(f"step must be >= 1, got {self.step}")
        if self.row_number is not None and self.round_number is not None:
            raise ValueError("an instruction has a row number or a round number, not both")
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def position(self) -> Optional[int]:
        """Row or round number, whichever is set."""
        return self.row_number if self.row_number is not None else self.round_number

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "row_number": self.row_number,
            "round_number": self.round_number,
            "instruction_type": self.instruction_type.value,
            "text": self.text,
            "stitch_count_after": self.stitch_count_after,
            "metadata": dict(self.metadata),
        }
