"""
Core type definitions for the shared utilities layer.

Gauge is a frozen dataclass with fail-fast validation in __post_init__.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CM_PER_INCH: float = 2.54


class InvalidGauge(ValueError):
    """Raised when a gauge rate or reference length is not strictly positive."""


class MeasurementUnit(str, Enum):
    """Unit of the gauge reference length."""

    CM = "cm"
    INCH = "inch"


@dataclass(frozen=True)
class Gauge:
    """
    Knitting or crochet gauge: stitches and rows over a reference length.

    The conventional swatch sizes are 10 cm and 4 inches; any positive
    reference length is accepted. Gauges are immutable after construction and
    safe to share across calculators.
    """

    stitches_per_ref_length: float
    rows_per_ref_length: float
    reference_length: float = 10.0
    unit: MeasurementUnit = MeasurementUnit.CM

    def __post_init__(self) -> None:
        for name in ("stitches_per_ref_length", "rows_per_ref_length", "reference_length"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise InvalidGauge(f"{name} must be a number, got {value!r}")
        if self.stitches_per_ref_length <= 0:
            raise InvalidGauge(
                f"stitches_per_ref_length must be positive, got {self.stitches_per_ref_length}"
            )
        if self.rows_per_ref_length <= 0:
            raise InvalidGauge(
                f"rows_per_ref_length must be positive, got {self.rows_per_ref_length}"
            )
        if self.reference_length <= 0:
            raise InvalidGauge(f"reference_length must be positive, got {self.reference_length}")

    @classmethod
    def per_10cm(cls, stitches: float, rows: float) -> Gauge:
        """Gauge measured over a 10 cm swatch."""
        return cls(stitches, rows, 10.0, MeasurementUnit.CM)

    @classmethod
    def per_4in(cls, stitches: float, rows: float) -> Gauge:
        """Gauge measured over a 4 inch swatch."""
        return cls(stitches, rows, 4.0, MeasurementUnit.INCH)

    @property
    def reference_length_cm(self) -> float:
        if self.unit == MeasurementUnit.INCH:
            return self.reference_length * CM_PER_INCH
        return self.reference_length

    @property
    def stitches_per_cm(self) -> float:
        return self.stitches_per_ref_length / self.reference_length_cm

    @property
    def rows_per_cm(self) -> float:
        return self.rows_per_ref_length / self.reference_length_cm

    @property
    def stitches_per_10cm(self) -> float:
        return self.stitches_per_cm * 10

    @property
    def rows_per_10cm(self) -> float:
        return self.rows_per_cm * 10
