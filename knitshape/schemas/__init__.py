from .inputs import (
    ROUNDED_ARMHOLE_RATIOS,
    ROUNDED_NECKLINE_RATIOS,
    SCOOP_NECKLINE_RATIOS,
    ArmholeInput,
    ArmholeRatios,
    ComponentInput,
    HammerSleeveInput,
    InputFieldError,
    NecklineInput,
    NecklineRatios,
    RaglanEase,
    RaglanInput,
    ShawlInput,
)
from .results import (
    CalculationMetadata,
    CalculationResult,
    ErrorCode,
    RenderError,
    RenderResult,
    Severity,
    ShapingError,
    ValidationError,
    ValidationMessage,
)
from .schedule import (
    RAGLAN_LINES,
    ActionType,
    ArmholeKind,
    ArmholeSchedule,
    FabricSide,
    HammerBodyPanel,
    HammerExtension,
    HammerSleeveSchedule,
    HammerVerticalPart,
    NecklineKind,
    NecklineSchedule,
    RaglanDistribution,
    RaglanSchedule,
    RaglanSeparation,
    RaglanShaping,
    ShapingAction,
    ShapingSchedule,
    ShawlMethod,
    ShawlPhase,
    ShawlSchedule,
    Topology,
    WorkStyle,
)

__all__ = [
    # Schedule model
    "RAGLAN_LINES",
    "ActionType",
    "FabricSide",
    "Topology",
    "ShapingAction",
    "ShapingSchedule",
    "NecklineKind",
    "NecklineSchedule",
    "ArmholeKind",
    "ArmholeSchedule",
    "RaglanDistribution",
    "RaglanShaping",
    "RaglanSeparation",
    "RaglanSchedule",
    "HammerExtension",
    "HammerVerticalPart",
    "HammerBodyPanel",
    "HammerSleeveSchedule",
    "ShawlMethod",
    "WorkStyle",
    "ShawlPhase",
    "ShawlSchedule",
    # Inputs
    "ComponentInput",
    "InputFieldError",
    "NecklineRatios",
    "ArmholeRatios",
    "RaglanEase",
    "ROUNDED_NECKLINE_RATIOS",
    "SCOOP_NECKLINE_RATIOS",
    "ROUNDED_ARMHOLE_RATIOS",
    "NecklineInput",
    "ArmholeInput",
    "RaglanInput",
    "HammerSleeveInput",
    "ShawlInput",
    # Results
    "Severity",
    "ErrorCode",
    "ValidationMessage",
    "ValidationError",
    "RenderError",
    "ShapingError",
    "CalculationMetadata",
    "CalculationResult",
    "RenderResult",
]
