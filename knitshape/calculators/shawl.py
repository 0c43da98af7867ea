"""
Triangular shawl calculator.

Three constructions are supported:

- top-down center-out: a 3-stitch cast-on growing by 4 sts every other row
  (one at each edge, one either side of the center spine);
- side-to-side: a 4-stitch point that grows 1 st every other row up to the
  center depth, then mirrors back down to 4;
- bottom-up: the full wingspan cast on (forced odd) and decreased 2 sts every
  other row down to 3.

Border stitches are worked plain at each edge and sit outside the shaping:
they are added to every live count but never change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from knitshape.schemas.inputs import ShawlInput
from knitshape.schemas.results import CalculationResult, ErrorCode
from knitshape.schemas.schedule import (
    ActionType,
    ShawlMethod,
    ShawlPhase,
    ShawlSchedule,
    WorkStyle,
)
from knitshape.utilities.conversion import cm_to_rows, cm_to_stitches

from .common import (
    Findings,
    check_component_key,
    check_gauge,
    check_non_negative_int,
    check_positive,
    failed,
    relative_deviation,
    resolve_input,
    succeeded,
)

logger = logging.getLogger(__name__)

SHAPING_FREQUENCY = 2

CENTER_OUT_CAST_ON = 3
CENTER_OUT_STITCHES_PER_EVENT = 4
# Only part of the top edge of a center-out triangle spans the wingspan.
CENTER_OUT_WINGSPAN_FACTOR = 0.7

SIDE_TO_SIDE_CAST_ON = 4
BOTTOM_UP_FINAL_STITCHES = 3


class ComplexityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ShawlComplexity:
    """Rough size and difficulty estimate used for planning."""

    level: ComplexityLevel
    estimated_stitches: int
    factors: tuple[str, ...]


def estimate_shawl_complexity(inp: ShawlInput) -> ShawlComplexity:
    """
    Estimate how large and involved a shawl will be from its target size.

    The estimate works from the triangle's area (cm²); bottom-up shawls rate
    higher for their large cast-on and side-to-side ones for their two phases.
    """
    factors: list[str] = []
    area = inp.target_wingspan_cm * inp.target_depth_cm / 2
    estimate = round(area * 0.5)

    if area > 10000:
        factors.append("Large dimensions")
        estimate *= 1.2
    elif area > 5000:
        factors.append("Medium dimensions")
    else:
        factors.append("Small to medium dimensions")

    match inp.method:
        case ShawlMethod.TOP_DOWN_CENTER_OUT:
            factors.append("Top-down center-out construction (standard complexity)")
        case ShawlMethod.SIDE_TO_SIDE:
            factors.append("Side-to-side construction (moderate complexity)")
            estimate *= 1.1
        case ShawlMethod.BOTTOM_UP:
            factors.append("Bottom-up construction (high initial stitch count)")
            estimate *= 1.3

    if inp.border_stitches_each_side > 0:
        factors.append(f"Border stitches: {inp.border_stitches_each_side} each side")
        estimate += inp.border_stitches_each_side * 4

    if area > 10000 or (area > 5000 and inp.method == ShawlMethod.BOTTOM_UP):
        level = ComplexityLevel.HIGH
    elif area > 2000 or inp.method == ShawlMethod.SIDE_TO_SIDE:
        level = ComplexityLevel.MEDIUM
    else:
        level = ComplexityLevel.LOW
    return ShawlComplexity(level=level, estimated_stitches=round(estimate), factors=tuple(factors))


# ── Methods ────────────────────────────────────────────────────────────────────
#
# Each returns (cast_on, phases, final_count, actual_wingspan_cm, actual_depth_cm).


def _top_down_center_out(inp: ShawlInput, findings: Findings):
    gauge = inp.gauge
    events = cm_to_rows(inp.target_depth_cm, gauge) // SHAPING_FREQUENCY
    rows = events * SHAPING_FREQUENCY
    final = CENTER_OUT_CAST_ON + events * CENTER_OUT_STITCHES_PER_EVENT
    phases = (
        ShawlPhase(
            name="increase",
            action_type=ActionType.INCREASE,
            description="Increase at each edge and either side of the center spine",
            total_shaping_rows=events,
            stitches_per_event=CENTER_OUT_STITCHES_PER_EVENT,
            total_rows_in_phase=rows,
            shaping_frequency=SHAPING_FREQUENCY,
        ),
    )
    actual_depth = rows / gauge.rows_per_cm
    actual_wingspan = final * CENTER_OUT_WINGSPAN_FACTOR / gauge.stitches_per_cm
    _warn_if_off(findings, "depth", actual_depth, inp.target_depth_cm, 0.10)
    _warn_if_off(findings, "wingspan", actual_wingspan, inp.target_wingspan_cm, 0.15)
    return CENTER_OUT_CAST_ON, phases, final, actual_wingspan, actual_depth


def _side_to_side(inp: ShawlInput, findings: Findings):
    gauge = inp.gauge
    widest = cm_to_stitches(inp.target_depth_cm, gauge)
    events = max(0, widest - SIDE_TO_SIDE_CAST_ON)
    phase_rows = events * SHAPING_FREQUENCY
    phases: tuple[ShawlPhase, ...] = ()
    if events:
        phases = (
            ShawlPhase(
                name="increase",
                action_type=ActionType.INCREASE,
                description="Increase at the shaped edge up to the center depth",
                total_shaping_rows=events,
                stitches_per_event=1,
                total_rows_in_phase=phase_rows,
                shaping_frequency=SHAPING_FREQUENCY,
            ),
            ShawlPhase(
                name="decrease",
                action_type=ActionType.DECREASE,
                description="Decrease at the shaped edge back down to the point",
                total_shaping_rows=events,
                stitches_per_event=1,
                total_rows_in_phase=phase_rows,
                shaping_frequency=SHAPING_FREQUENCY,
            ),
        )
    actual_wingspan = 2 * phase_rows / gauge.rows_per_cm
    actual_depth = (SIDE_TO_SIDE_CAST_ON + events) / gauge.stitches_per_cm
    _warn_if_off(findings, "wingspan", actual_wingspan, inp.target_wingspan_cm, 0.10)
    _warn_if_off(findings, "depth", actual_depth, inp.target_depth_cm, 0.15)
    return SIDE_TO_SIDE_CAST_ON, phases, SIDE_TO_SIDE_CAST_ON, actual_wingspan, actual_depth


def _bottom_up(inp: ShawlInput, findings: Findings):
    gauge = inp.gauge
    cast_on = max(BOTTOM_UP_FINAL_STITCHES, cm_to_stitches(inp.target_wingspan_cm, gauge))
    if cast_on % 2 == 0:
        # Odd so that 2-st decreases land exactly on 3.
        cast_on += 1
    events = (cast_on - BOTTOM_UP_FINAL_STITCHES) // 2
    rows = events * SHAPING_FREQUENCY
    phases: tuple[ShawlPhase, ...] = ()
    if events:
        phases = (
            ShawlPhase(
                name="decrease",
                action_type=ActionType.DECREASE,
                description="Decrease 1 st at each edge",
                total_shaping_rows=events,
                stitches_per_event=2,
                total_rows_in_phase=rows,
                shaping_frequency=SHAPING_FREQUENCY,
            ),
        )
    actual_depth = rows / gauge.rows_per_cm
    actual_wingspan = cast_on / gauge.stitches_per_cm
    _warn_if_off(findings, "depth", actual_depth, inp.target_depth_cm, 0.10)
    _warn_if_off(findings, "wingspan", actual_wingspan, inp.target_wingspan_cm, 0.05)
    return cast_on, phases, BOTTOM_UP_FINAL_STITCHES, actual_wingspan, actual_depth


def _warn_if_off(
    findings: Findings, label: str, actual: float, target: float, tolerance: float
) -> None:
    if relative_deviation(actual, target) > tolerance:
        findings.warning(
            f"{label.upper()}_DEVIATION",
            f"Actual {label} ({actual:.1f}cm) differs from target ({target:g}cm) "
            f"by more than {tolerance:.0%}",
            field=f"target_{label}_cm",
        )


_METHODS = {
    ShawlMethod.TOP_DOWN_CENTER_OUT: _top_down_center_out,
    ShawlMethod.SIDE_TO_SIDE: _side_to_side,
    ShawlMethod.BOTTOM_UP: _bottom_up,
}


def _validate(inp: ShawlInput) -> Findings:
    findings = Findings()
    check_component_key(findings, inp.component_key)
    check_gauge(findings, inp.gauge)
    check_positive(findings, "target_wingspan_cm", inp.target_wingspan_cm, "Target wingspan")
    check_positive(findings, "target_depth_cm", inp.target_depth_cm, "Target depth")
    check_non_negative_int(
        findings, "border_stitches_each_side", inp.border_stitches_each_side, "Border stitches"
    )
    if inp.method not in _METHODS:
        findings.error(
            ErrorCode.INVALID_INPUT,
            "UNKNOWN_METHOD",
            f"Unsupported shawl construction method: {inp.method!r}",
            field="method",
        )
    if not isinstance(inp.work_style, WorkStyle):
        findings.error(
            ErrorCode.INVALID_INPUT,
            "UNKNOWN_WORK_STYLE",
            f"Unsupported work style: {inp.work_style!r}",
            field="work_style",
        )
    return findings


def calculate_shawl_shaping(
    data: Union[ShawlInput, Mapping[str, Any]],
) -> CalculationResult[ShawlSchedule]:
    """
    Calculate the shaping phases of a triangular shawl.

    Parameters
    ----------
    data:
        A ShawlInput, or a mapping with the same fields.

    Returns
    -------
    CalculationResult[ShawlSchedule]
        Metadata carries the wingspan and depth actually achieved.
    """
    inp, error = resolve_input(ShawlInput, data)
    if error is not None:
        return failed(error, "shawl", log=logger)
    assert inp is not None

    findings = _validate(inp)
    if findings.has_errors:
        return failed(findings.to_validation_error(), "shawl", inp.component_key, logger)

    cast_on, phases, final, wingspan, depth = _METHODS[inp.method](inp, findings)
    schedule = ShawlSchedule(
        method=inp.method,
        work_style=inp.work_style,
        cast_on_stitches=cast_on,
        phases=phases,
        final_stitch_count=final,
        border_stitches_each_side=inp.border_stitches_each_side,
    )
    logger.debug(
        f"{inp.method.value}: cast_on={cast_on} final={final} rows={schedule.total_rows} "
        f"phases={len(phases)}"
    )
    complexity = estimate_shawl_complexity(inp)
    return succeeded(
        schedule,
        findings,
        inp.method.value,
        inp,
        derived={
            "actual_wingspan_cm": round(wingspan, 1),
            "actual_depth_cm": round(depth, 1),
            "total_rows": schedule.total_rows,
            "complexity": complexity.level.value,
        },
        log=logger,
    )
