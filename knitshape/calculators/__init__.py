from .armhole import (
    adjusted_armhole_ratios,
    armhole_shaping_start_row,
    calculate_armhole_shaping,
    check_armhole_fit,
    estimate_armhole_dimensions,
    summarize_armhole_schedule,
)
from .hammer_sleeve import calculate_hammer_sleeve_shaping
from .neckline import (
    adjusted_neckline_ratios,
    calculate_neckline_shaping,
    neckline_shaping_start_row,
    summarize_neckline_schedule,
    validate_neckline_schedule,
)
from .raglan import calculate_raglan_shaping
from .shawl import (
    ComplexityLevel,
    ShawlComplexity,
    calculate_shawl_shaping,
    estimate_shawl_complexity,
)

__all__ = [
    # Entry points
    "calculate_neckline_shaping",
    "calculate_armhole_shaping",
    "calculate_raglan_shaping",
    "calculate_hammer_sleeve_shaping",
    "calculate_shawl_shaping",
    # Neckline helpers
    "adjusted_neckline_ratios",
    "neckline_shaping_start_row",
    "validate_neckline_schedule",
    "summarize_neckline_schedule",
    # Armhole helpers
    "adjusted_armhole_ratios",
    "armhole_shaping_start_row",
    "check_armhole_fit",
    "estimate_armhole_dimensions",
    "summarize_armhole_schedule",
    # Shawl helpers
    "ComplexityLevel",
    "ShawlComplexity",
    "estimate_shawl_complexity",
]
