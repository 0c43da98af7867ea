"""
Unit conversion between physical dimensions and stitch/row counts.

All physical dimensions are in centimetres unless otherwise noted.
All functions are pure, with no side effects and no state.

Every calculator rounds through round_half_up so that a measurement landing
exactly on .5 of a stitch resolves the same way everywhere (Python's built-in
round() uses banker's rounding, which would not).
"""

from __future__ import annotations

import math

from .types import CM_PER_INCH, Gauge, InvalidGauge


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return math.floor(value + 0.5)


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp an integer into the closed range [lower, upper]."""
    return max(lower, min(upper, value))


def inches_to_cm(inches: float) -> float:
    """Convert inches to centimetres."""
    return inches * CM_PER_INCH


def cm_to_inches(cm: float) -> float:
    """Convert centimetres to inches."""
    return cm / CM_PER_INCH


def _check_rates(gauge: Gauge) -> None:
    if gauge.stitches_per_ref_length <= 0 or gauge.rows_per_ref_length <= 0:
        raise InvalidGauge(
            f"gauge rates must be positive, got {gauge.stitches_per_ref_length} sts / "
            f"{gauge.rows_per_ref_length} rows"
        )


def cm_to_stitches(length_cm: float, gauge: Gauge) -> int:
    """
    Convert a physical width (cm) to a whole stitch count.

    Raises
    ------
    InvalidGauge
        If either gauge rate is not strictly positive.
    """
    _check_rates(gauge)
    return round_half_up(length_cm * gauge.stitches_per_cm)


def cm_to_rows(length_cm: float, gauge: Gauge) -> int:
    """
    Convert a physical height (cm) to a whole row count.

    Raises
    ------
    InvalidGauge
        If either gauge rate is not strictly positive.
    """
    _check_rates(gauge)
    return round_half_up(length_cm * gauge.rows_per_cm)


def stitches_to_cm(count: float, gauge: Gauge) -> float:
    """Convert a stitch count back to a physical width in cm."""
    _check_rates(gauge)
    return count / gauge.stitches_per_cm


def rows_to_cm(count: float, gauge: Gauge) -> float:
    """Convert a row count back to a physical height in cm."""
    _check_rates(gauge)
    return count / gauge.rows_per_cm
