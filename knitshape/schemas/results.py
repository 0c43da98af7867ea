"""
Error taxonomy and result envelopes.

The public calculate_* and render_instructions functions never raise for
expected bad input. They return a CalculationResult or RenderResult carrying a
success flag, a structured error when unsuccessful, and advisory warnings that
never block a result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, Optional, TypeVar

from .schedule import ShapingSchedule


class Severity(str, Enum):
    """Severity level of a validation message."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ErrorCode(str, Enum):
    # Calculation
    INVALID_GAUGE = "invalid_gauge"
    INVALID_DIMENSION = "invalid_dimension"
    INVALID_INPUT = "invalid_input"
    # Rendering
    MISSING_CALCULATIONS = "missing_calculations"
    INVALID_SCHEDULE = "invalid_schedule"
    UNSUPPORTED_COMBINATION = "unsupported_combination"


@dataclass(frozen=True)
class ValidationMessage:
    """A single validation finding attached to a field of the input."""

    severity: Severity
    code: str
    message: str
    field: Optional[str] = None
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ValidationError:
    """
    Calculation failure: missing or out-of-domain input.

    Attributes:
        code: Category of the first error found.
        message: Human-readable summary of every error.
        messages: All ERROR-severity findings, in validation order.
    """

    code: ErrorCode
    message: str
    messages: tuple[ValidationMessage, ...] = ()

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


@dataclass(frozen=True)
class RenderError:
    """Rendering failure: unusable schedule or unsupported combination."""

    code: ErrorCode
    message: str
    field: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class ShapingError(Exception):
    """Raised by unwrap() on an unsuccessful result.

    Attributes:
        error: The ValidationError or RenderError carried by the result.
    """

    def __init__(self, error: ValidationError | RenderError) -> None:
        super().__init__(str(error))
        self.error = error


S = TypeVar("S", bound=ShapingSchedule)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class CalculationMetadata:
    """Descriptive facts about a calculation; ``calculated_at`` never affects equality."""

    algorithm: str
    component_key: str
    input_summary: MappingProxyType[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    derived: MappingProxyType[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    calculated_at: str = field(default_factory=_now, compare=False)


@dataclass(frozen=True)
class CalculationResult(Generic[S]):
    """Outcome of one topology calculation."""

    success: bool
    schedule: Optional[S] = None
    error: Optional[ValidationError] = None
    warnings: tuple[ValidationMessage, ...] = ()
    metadata: Optional[CalculationMetadata] = None

    @property
    def warning_messages(self) -> list[str]:
        return [w.message for w in self.warnings]

    def unwrap(self) -> S:
        """Return the schedule or raise ShapingError."""
        if not self.success or self.schedule is None:
            raise ShapingError(
                self.error or ValidationError(ErrorCode.INVALID_INPUT, "no schedule produced")
            )
        return self.schedule


@dataclass(frozen=True)
class RenderResult:
    """Outcome of rendering one schedule to instructions."""

    success: bool
    instructions: tuple = ()  # tuple[DetailedInstruction, ...]
    error: Optional[RenderError] = None
    warnings: tuple[str, ...] = ()

    def unwrap(self) -> tuple:
        """Return the instructions or raise ShapingError."""
        if not self.success:
            raise ShapingError(
                self.error or RenderError(ErrorCode.INVALID_SCHEDULE, "rendering failed")
            )
        return self.instructions

    @property
    def texts(self) -> list[str]:
        return [i.text for i in self.instructions]
