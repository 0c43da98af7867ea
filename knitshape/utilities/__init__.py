from .conversion import (
    clamp,
    cm_to_inches,
    cm_to_rows,
    cm_to_stitches,
    inches_to_cm,
    round_half_up,
    rows_to_cm,
    stitches_to_cm,
)
from .types import CM_PER_INCH, Gauge, InvalidGauge, MeasurementUnit

__all__ = [
    # Types
    "CM_PER_INCH",
    "Gauge",
    "InvalidGauge",
    "MeasurementUnit",
    # Conversion
    "clamp",
    "cm_to_inches",
    "cm_to_rows",
    "cm_to_stitches",
    "inches_to_cm",
    "round_half_up",
    "rows_to_cm",
    "stitches_to_cm",
]
