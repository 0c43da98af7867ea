"""
Shared plumbing for the topology calculators: input resolution, validation
message collection and result building.

Every calculator follows the same shape:

    resolve input → validate → convert → distribute → schedule → wrap

Validation findings are collected rather than raised so that a caller sees
every problem with its input at once. Any ERROR finding turns the result into
a ValidationError; WARNING findings ride along on a successful result.
"""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Any, Mapping, Optional, TypeVar, Union

from knitshape.schemas.inputs import ComponentInput
from knitshape.schemas.results import (
    CalculationMetadata,
    CalculationResult,
    ErrorCode,
    Severity,
    ValidationError,
    ValidationMessage,
)
from knitshape.utilities.types import Gauge, InvalidGauge

logger = logging.getLogger(__name__)

I = TypeVar("I", bound=ComponentInput)


class Findings:
    """Ordered collection of validation messages for one calculation."""

    def __init__(self) -> None:
        self.messages: list[ValidationMessage] = []
        self._error_codes: list[ErrorCode] = []

    def error(
        self,
        category: ErrorCode,
        code: str,
        message: str,
        field: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self._error_codes.append(category)
        self.messages.append(ValidationMessage(Severity.ERROR, code, message, field, suggestion))

    def warning(
        self,
        code: str,
        message: str,
        field: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.messages.append(ValidationMessage(Severity.WARNING, code, message, field, suggestion))

    def info(self, code: str, message: str, field: Optional[str] = None) -> None:
        self.messages.append(ValidationMessage(Severity.INFO, code, message, field))

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity != Severity.ERROR]

    @property
    def has_errors(self) -> bool:
        return bool(self._error_codes)

    def to_validation_error(self) -> ValidationError:
        """Collapse the ERROR findings into one ValidationError (category of the first)."""
        errors = self.errors
        return ValidationError(
            code=self._error_codes[0],
            message="; ".join(m.message for m in errors),
            messages=tuple(errors),
        )


# ── Input resolution ───────────────────────────────────────────────────────────


def resolve_input(
    input_cls: type[I], data: Union[I, Mapping[str, Any]]
) -> tuple[Optional[I], Optional[ValidationError]]:
    """
    Accept a typed input record or a free-form mapping.

    Returns the record and None, or None and the ValidationError describing
    why the mapping could not be converted.
    """
    if isinstance(data, input_cls):
        return data, None
    if isinstance(data, Mapping):
        try:
            return input_cls.from_mapping(data), None
        except InvalidGauge as exc:
            return None, _single_error(ErrorCode.INVALID_GAUGE, "INVALID_GAUGE", str(exc), "gauge")
        except (TypeError, ValueError) as exc:
            return None, _single_error(ErrorCode.INVALID_INPUT, "MALFORMED_INPUT", str(exc))
    return None, _single_error(
        ErrorCode.INVALID_INPUT,
        "MALFORMED_INPUT",
        f"expected {input_cls.__name__} or a mapping, got {type(data).__name__}",
    )


def _single_error(
    category: ErrorCode, code: str, message: str, field: Optional[str] = None
) -> ValidationError:
    msg = ValidationMessage(Severity.ERROR, code, message, field)
    return ValidationError(code=category, message=message, messages=(msg,))


# ── Common checks ──────────────────────────────────────────────────────────────


def check_component_key(findings: Findings, key: Any) -> None:
    if not isinstance(key, str) or not key.strip():
        findings.error(
            ErrorCode.INVALID_INPUT,
            "EMPTY_COMPONENT_KEY",
            "Component key must be a non-empty string",
            field="component_key",
        )


def check_gauge(findings: Findings, gauge: Any) -> bool:
    """Record an INVALID_GAUGE error unless *gauge* is usable; return whether it is."""
    if not isinstance(gauge, Gauge):
        findings.error(
            ErrorCode.INVALID_GAUGE,
            "INVALID_GAUGE",
            f"Gauge is required, got {type(gauge).__name__}",
            field="gauge",
        )
        return False
    if not gauge.stitches_per_ref_length > 0 or not gauge.rows_per_ref_length > 0:
        findings.error(
            ErrorCode.INVALID_GAUGE,
            "INVALID_GAUGE",
            f"Gauge must have positive stitch and row counts, got "
            f"{gauge.stitches_per_ref_length} sts / {gauge.rows_per_ref_length} rows",
            field="gauge",
            suggestion="Measure a swatch and enter stitches and rows per reference length",
        )
        return False
    if not gauge.reference_length > 0:
        findings.error(
            ErrorCode.INVALID_GAUGE,
            "INVALID_GAUGE",
            f"Gauge reference length must be positive, got {gauge.reference_length}",
            field="gauge",
        )
        return False
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_positive(findings: Findings, field: str, value: Any, label: str) -> bool:
    """Record an INVALID_DIMENSION error unless *value* is a finite number > 0."""
    if not _is_number(value) or not math.isfinite(value) or value <= 0:
        findings.error(
            ErrorCode.INVALID_DIMENSION,
            f"{field.upper()}_NOT_POSITIVE",
            f"{label} must be greater than 0, got {value!r}",
            field=field,
        )
        return False
    return True


def check_optional_positive(findings: Findings, field: str, value: Any, label: str) -> bool:
    if value is None:
        return True
    return check_positive(findings, field, value, label)


def check_non_negative_int(findings: Findings, field: str, value: Any, label: str) -> bool:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        findings.error(
            ErrorCode.INVALID_INPUT,
            f"{field.upper()}_INVALID",
            f"{label} must be a whole number >= 0, got {value!r}",
            field=field,
        )
        return False
    return True


def relative_deviation(actual: float, target: float) -> float:
    return abs(actual - target) / target if target else 0.0


# ── Result building ────────────────────────────────────────────────────────────


def failed(
    error: ValidationError,
    algorithm: str,
    component_key: Any = "",
    log: logging.Logger = logger,
) -> CalculationResult[Any]:
    log.warning(f"{algorithm} calculation failed for {component_key!r}: {error.message}")
    return CalculationResult(success=False, error=error)


def succeeded(
    schedule: Any,
    findings: Findings,
    algorithm: str,
    inp: ComponentInput,
    derived: Optional[Mapping[str, Any]] = None,
    log: logging.Logger = logger,
) -> CalculationResult[Any]:
    for message in findings.warnings:
        log.info(f"{algorithm} [{getattr(inp, 'component_key', '')}]: {message.message}")
    metadata = CalculationMetadata(
        algorithm=algorithm,
        component_key=getattr(inp, "component_key", ""),
        input_summary=inp.summary(),
        derived=MappingProxyType(dict(derived or {})),
    )
    return CalculationResult(
        success=True,
        schedule=schedule,
        warnings=tuple(findings.warnings),
        metadata=metadata,
    )


# ── Row arithmetic ─────────────────────────────────────────────────────────────


def next_right_side_row(after_row: int) -> int:
    """First odd (right-side) row strictly after *after_row*."""
    return after_row + 1 if after_row % 2 == 0 else after_row + 2


def right_side_interval(rows: int) -> int:
    """
    Nearest even interval at or below *rows*, never below 2.

    Flat shaping worked on right-side rows only must repeat on an even
    cadence; an odd one lands every other occurrence on a wrong-side row.
    """
    return max(2, rows - rows % 2)
