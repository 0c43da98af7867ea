"""
Neckline shaping calculator: rounded, scoop and V-neck front necklines.

Rounded and scoop necklines use the traditional thirds rule: a third of the
neckline width is bound off at the center, and each side then loses its
remaining stitches in a rapid tranche (2 sts every other row) followed by a
gradual tranche (1 st every 4th row). The wider scoop proportions from
adjusted_neckline_ratios() apply only when passed in as the input's ratios. V-necks bind off almost nothing at the
center and decrease linearly up to the shoulder.

Both sides of the neck receive the same action list; the renderer works them
one after the other on their own stitches.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Mapping, Union

from knitshape.schemas.inputs import (
    ROUNDED_NECKLINE_RATIOS,
    SCOOP_NECKLINE_RATIOS,
    NecklineInput,
    NecklineRatios,
)
from knitshape.schemas.results import (
    CalculationResult,
    ErrorCode,
    Severity,
    ValidationMessage,
)
from knitshape.schemas.schedule import (
    ActionType,
    FabricSide,
    NecklineKind,
    NecklineSchedule,
    ShapingAction,
)
from knitshape.utilities.conversion import clamp, cm_to_rows, cm_to_stitches, round_half_up

from .common import (
    Findings,
    check_component_key,
    check_gauge,
    check_positive,
    failed,
    next_right_side_row,
    resolve_input,
    right_side_interval,
    succeeded,
)

logger = logging.getLogger(__name__)

ALGORITHM_ROUNDED = "rounded-thirds"
ALGORITHM_V_NECK = "v-neck-linear"

MAX_REASONABLE_DEPTH_CM = 30.0
SHALLOW_DEPTH_CM = 6.0
DEEP_DEPTH_CM = 12.0

V_NECK_CENTER_RATIO = 0.1
V_NECK_MAX_CENTER_STITCHES = 4
V_NECK_STITCHES_PER_EVENT = 2
V_NECK_MIN_FREQUENCY = 2
V_NECK_MAX_FREQUENCY = 4


def adjusted_neckline_ratios(kind: NecklineKind, depth_cm: float) -> NecklineRatios:
    """
    Pick shaping ratios for a neckline of the given kind and depth.

    Scoop necklines start from a wider center and a larger rapid tranche.
    Shallow necklines (< 6 cm) tighten the gradual interval to 2 rows so the
    shaping fits; deep ones (> 12 cm) relax the intervals to 4/6. Intervals
    stay even so every decrease falls on a right-side row.
    """
    base = SCOOP_NECKLINE_RATIOS if kind == NecklineKind.SCOOP else ROUNDED_NECKLINE_RATIOS
    if depth_cm < SHALLOW_DEPTH_CM:
        return dataclasses.replace(base, rapid_interval=2, gradual_interval=2)
    if depth_cm > DEEP_DEPTH_CM:
        return dataclasses.replace(base, rapid_interval=4, gradual_interval=6)
    return base


def neckline_shaping_start_row(total_component_rows: int, depth_rows: int) -> int:
    """Row of the component on which neckline shaping begins (never before row 1)."""
    return max(1, total_component_rows - depth_rows - 2)


# ── Algorithms ─────────────────────────────────────────────────────────────────


def _rounded_actions(per_side: int, ratios: NecklineRatios) -> tuple[ShapingAction, ...]:
    rapid_stitches = round_half_up(per_side * ratios.rapid_ratio)
    rapid_events = rapid_stitches // 2
    gradual_events = per_side - 2 * rapid_events

    actions: list[ShapingAction] = []
    row = 1
    if rapid_events > 0:
        rapid = ShapingAction(
            action_type=ActionType.DECREASE,
            stitches=2,
            row_offset=row,
            side_of_fabric=FabricSide.RIGHT_SIDE,
            repeats=rapid_events,
            every_n_rows=right_side_interval(ratios.rapid_interval),
        )
        actions.append(rapid)
        row = next_right_side_row(rapid.block_last_row)
    if gradual_events > 0:
        actions.append(
            ShapingAction(
                action_type=ActionType.DECREASE,
                stitches=1,
                row_offset=row,
                side_of_fabric=FabricSide.RIGHT_SIDE,
                repeats=gradual_events,
                every_n_rows=right_side_interval(ratios.gradual_interval),
            )
        )
    return tuple(actions)


def v_neck_frequency(total_rows: int, per_side: int) -> int:
    """Rows between V-neck decreases: clamped to [2, 4], then kept even."""
    if per_side <= 0:
        return V_NECK_MIN_FREQUENCY
    raw = math.floor(total_rows / (per_side / 2))
    return right_side_interval(clamp(raw, V_NECK_MIN_FREQUENCY, V_NECK_MAX_FREQUENCY))


def _v_neck_actions(per_side: int, total_rows: int) -> tuple[ShapingAction, ...]:
    if per_side <= 0:
        return ()
    frequency = v_neck_frequency(total_rows, per_side)
    events, odd = divmod(per_side, V_NECK_STITCHES_PER_EVENT)
    actions: list[ShapingAction] = []
    row = 1
    if events > 0:
        main = ShapingAction(
            action_type=ActionType.DECREASE,
            stitches=V_NECK_STITCHES_PER_EVENT,
            row_offset=row,
            side_of_fabric=FabricSide.RIGHT_SIDE,
            repeats=events,
            every_n_rows=frequency,
        )
        actions.append(main)
        row = main.block_last_row + 1
    if odd:
        # Odd per-side count: one last single decrease on the same cadence.
        actions.append(
            ShapingAction(
                action_type=ActionType.DECREASE,
                stitches=1,
                row_offset=row if row % 2 == 1 else row + 1,
                side_of_fabric=FabricSide.RIGHT_SIDE,
            )
        )
    return tuple(actions)


# ── Validation ─────────────────────────────────────────────────────────────────


def _validate(inp: NecklineInput) -> Findings:
    findings = Findings()
    check_component_key(findings, inp.component_key)
    gauge_ok = check_gauge(findings, inp.gauge)
    if not isinstance(inp.kind, NecklineKind):
        findings.error(
            ErrorCode.INVALID_INPUT,
            "UNKNOWN_NECKLINE_KIND",
            f"Unsupported neckline kind: {inp.kind!r}",
            field="kind",
        )
    depth_ok = check_positive(findings, "depth_cm", inp.depth_cm, "Neckline depth")
    check_positive(findings, "width_cm", inp.width_cm, "Neckline width")
    panel_ok = check_positive(
        findings, "panel_width_stitches", inp.panel_width_stitches, "Panel width"
    )
    shoulder_ok = check_positive(
        findings, "shoulder_width_cm", inp.shoulder_width_cm, "Shoulder width"
    )

    if depth_ok and inp.depth_cm > MAX_REASONABLE_DEPTH_CM:
        findings.warning(
            "DEEP_NECKLINE",
            f"Very deep neckline ({inp.depth_cm} cm) may affect garment structure",
            field="depth_cm",
        )
    if gauge_ok and panel_ok and shoulder_ok:
        shoulder_stitches = cm_to_stitches(inp.shoulder_width_cm, inp.gauge)
        if 2 * shoulder_stitches >= inp.panel_width_stitches:
            findings.warning(
                "WIDE_SHOULDERS",
                "Shoulder width seems very large relative to panel width",
                field="shoulder_width_cm",
                suggestion="Check that the shoulder width is for one shoulder only",
            )
    return findings


def validate_neckline_schedule(schedule: NecklineSchedule) -> list[ValidationMessage]:
    """
    Sanity-check a finished neckline schedule.

    Returns ERROR for a center bind-off wider than half the panel, and
    WARNINGs for a very narrow center, missing side shaping, or shaping that
    runs past the neckline depth.
    """
    messages: list[ValidationMessage] = []
    panel = schedule.panel_stitches
    if panel > 0:
        share = schedule.center_bind_off_stitches / panel
        if share > 0.5:
            messages.append(
                ValidationMessage(
                    Severity.ERROR,
                    "CENTER_TOO_WIDE",
                    f"Center bind-off ({schedule.center_bind_off_stitches} sts) exceeds "
                    f"50% of the panel ({panel} sts)",
                )
            )
        elif share < 0.1 and schedule.kind != NecklineKind.V_NECK:
            messages.append(
                ValidationMessage(
                    Severity.WARNING,
                    "CENTER_TOO_NARROW",
                    f"Center bind-off ({schedule.center_bind_off_stitches} sts) is less "
                    f"than 10% of the panel ({panel} sts)",
                )
            )
    if not schedule.left_side:
        messages.append(
            ValidationMessage(
                Severity.WARNING, "NO_SIDE_SHAPING", "Neckline has no side shaping actions"
            )
        )
    else:
        last_row = max(a.last_row for a in schedule.left_side)
        if last_row > schedule.total_rows:
            messages.append(
                ValidationMessage(
                    Severity.WARNING,
                    "SHAPING_EXCEEDS_DEPTH",
                    f"Side shaping ends on row {last_row} but the neckline is only "
                    f"{schedule.total_rows} rows deep",
                )
            )
    return messages


def summarize_neckline_schedule(schedule: NecklineSchedule) -> str:
    """One-line English summary, e.g. for logs and previews."""
    parts = [
        f"{schedule.kind.value} neckline: bind off {schedule.center_bind_off_stitches} center sts"
    ]
    for action in schedule.left_side:
        if action.has_repeat:
            parts.append(
                f"dec {action.stitches} st(s) every {action.every_n_rows} rows "
                f"x{action.repeat_count} each side"
            )
        else:
            parts.append(f"dec {action.stitches} st(s) once each side")
    parts.append(f"over {schedule.total_rows} rows")
    return ", ".join(parts)


# ── Public entry point ─────────────────────────────────────────────────────────


def calculate_neckline_shaping(
    data: Union[NecklineInput, Mapping[str, Any]],
) -> CalculationResult[NecklineSchedule]:
    """
    Calculate the front neckline shaping schedule.

    Parameters
    ----------
    data:
        A NecklineInput, or a mapping with the same fields (the gauge may be
        given as a mapping too).

    Returns
    -------
    CalculationResult[NecklineSchedule]
        Successful with mirrored left/right actions, or unsuccessful with a
        ValidationError listing every input problem. Never raises for bad
        input.
    """
    inp, error = resolve_input(NecklineInput, data)
    if error is not None:
        return failed(error, "neckline", log=logger)
    assert inp is not None

    findings = _validate(inp)
    if findings.has_errors:
        return failed(findings.to_validation_error(), "neckline", inp.component_key, logger)

    width = cm_to_stitches(inp.width_cm, inp.gauge)
    total_rows = cm_to_rows(inp.depth_cm, inp.gauge)
    shoulder = cm_to_stitches(inp.shoulder_width_cm, inp.gauge)

    if inp.kind == NecklineKind.V_NECK:
        algorithm = ALGORITHM_V_NECK
        center = min(V_NECK_MAX_CENTER_STITCHES, round_half_up(width * V_NECK_CENTER_RATIO))
        per_side = (width - center) // 2
        actions = _v_neck_actions(per_side, total_rows)
    else:
        algorithm = ALGORITHM_ROUNDED
        ratios = inp.ratios or ROUNDED_NECKLINE_RATIOS
        center = round_half_up(width * ratios.center_ratio)
        per_side = (width - center) // 2
        actions = _rounded_actions(per_side, ratios)

    logger.debug(
        f"{algorithm}: W={width} center={center} per_side={per_side} "
        f"rows={total_rows} actions={len(actions)}"
    )

    if width > inp.panel_width_stitches:
        findings.warning(
            "NECKLINE_WIDER_THAN_PANEL",
            f"Neckline width ({width} sts) exceeds panel width ({inp.panel_width_stitches} sts)",
            field="width_cm",
        )

    schedule = NecklineSchedule(
        kind=inp.kind,
        center_bind_off_stitches=center,
        left_side=actions,
        right_side=actions,
        total_rows=total_rows,
        final_shoulder_stitches_each_side=shoulder,
        panel_stitches=inp.panel_width_stitches,
        neckline_width_stitches=width,
    )
    for message in validate_neckline_schedule(schedule):
        if message.severity == Severity.ERROR:
            findings.error(ErrorCode.INVALID_DIMENSION, message.code, message.message, "width_cm")
        else:
            findings.warning(message.code, message.message)
    if findings.has_errors:
        return failed(findings.to_validation_error(), "neckline", inp.component_key, logger)

    return succeeded(
        schedule,
        findings,
        algorithm,
        inp,
        derived={
            "neckline_width_stitches": width,
            "decrease_stitches_each_side": per_side,
            "shaping_rows": total_rows,
        },
        log=logger,
    )
