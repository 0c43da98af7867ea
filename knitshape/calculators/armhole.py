"""
Armhole shaping calculator: rounded set-in and raglan armholes.

One schedule describes a single armhole edge; the same flow is worked at both
ends of the panel, so every action removes its stitches twice per panel.

Rounded set-in armholes bind off a quarter of the armhole width at the start
of two consecutive rows, then split the rest into a rapid tranche (2 sts every
other row) and a gradual tranche (1 st every 4th row). Raglan armholes bind
off a small underarm allowance and decrease steadily along the raglan line.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Mapping, Optional, Union

from knitshape.schemas.inputs import ROUNDED_ARMHOLE_RATIOS, ArmholeInput, ArmholeRatios
from knitshape.schemas.results import CalculationResult, ErrorCode, Severity, ValidationMessage
from knitshape.schemas.schedule import (
    ActionType,
    ArmholeKind,
    ArmholeSchedule,
    FabricSide,
    ShapingAction,
)
from knitshape.utilities.conversion import clamp, cm_to_rows, cm_to_stitches, round_half_up

from .common import (
    Findings,
    check_component_key,
    check_gauge,
    check_optional_positive,
    check_positive,
    failed,
    next_right_side_row,
    resolve_input,
    right_side_interval,
    succeeded,
)

logger = logging.getLogger(__name__)

ALGORITHM_ROUNDED = "rounded-set-in"
ALGORITHM_RAGLAN = "raglan-linear"

MAX_REASONABLE_DEPTH_CM = 35.0
MAX_REASONABLE_WIDTH_CM = 25.0
MAX_WIDTH_SHARE_OF_PANEL = 0.4
MAX_HEIGHT_SHARE_OF_PANEL = 0.6

RAGLAN_BASE_RATIO = 0.1
RAGLAN_MIN_BASE = 3
RAGLAN_MAX_BASE = 6
RAGLAN_STITCHES_PER_EVENT = 2
RAGLAN_MIN_FREQUENCY = 2
RAGLAN_MAX_FREQUENCY = 4

# Decreases start on row 3: the base bind-off takes the first two rows.
FIRST_DECREASE_ROW = 3


def adjusted_armhole_ratios(
    kind: ArmholeKind, depth_cm: float, width_cm: float
) -> ArmholeRatios:
    """
    Rounded set-in ratios tuned to the armhole's size.

    Deep armholes (> 25 cm) shape more gradually (4/6 row intervals, 40%
    rapid); shallow ones (< 18 cm) more aggressively (2/2, 60% rapid). Wide
    armholes (> 15 cm) bind off a third at the base, narrow ones (< 10 cm) a
    sixth. Raglan armholes do not use these ratios and get the defaults.
    """
    ratios = ROUNDED_ARMHOLE_RATIOS
    if kind != ArmholeKind.ROUNDED_SET_IN:
        return ratios
    if depth_cm > 25:
        ratios = dataclasses.replace(ratios, rapid_interval=4, gradual_interval=6, rapid_ratio=0.4)
    if depth_cm < 18:
        ratios = dataclasses.replace(ratios, rapid_interval=2, gradual_interval=2, rapid_ratio=0.6)
    if width_cm > 15:
        ratios = dataclasses.replace(ratios, base_ratio=1 / 3)
    if width_cm < 10:
        ratios = dataclasses.replace(ratios, base_ratio=1 / 6)
    return ratios


def estimate_armhole_dimensions(chest_circumference_cm: float, kind: ArmholeKind) -> tuple[float, float]:
    """
    Estimate (depth_cm, width_cm) from a chest circumference.

    Set-in armholes are about 22% / 12% of the chest, raglan armholes
    25% / 15%.
    """
    if kind == ArmholeKind.RAGLAN:
        return chest_circumference_cm * 0.25, chest_circumference_cm * 0.15
    return chest_circumference_cm * 0.22, chest_circumference_cm * 0.12


def armhole_shaping_start_row(total_component_rows: int, depth_rows: int) -> int:
    """Row of the panel on which armhole shaping begins, leaving 2 shoulder rows."""
    return max(1, total_component_rows - depth_rows - 2)


def check_armhole_fit(schedule: ArmholeSchedule, panel_rows: int) -> list[ValidationMessage]:
    """
    Check that the armhole fits the panel it is cut from.

    Warns when one edge's shaping removes more than 40% of the panel width, or
    when the shaping is taller than 60% of the panel.
    """
    messages: list[ValidationMessage] = []
    removed = schedule.stitches_removed_each_edge
    if removed > schedule.panel_stitches * MAX_WIDTH_SHARE_OF_PANEL:
        messages.append(
            ValidationMessage(
                Severity.WARNING,
                "ARMHOLE_TOO_WIDE_FOR_PANEL",
                f"Armhole shaping removes {removed} sts per edge, more than 40% of the "
                f"panel ({schedule.panel_stitches} sts)",
            )
        )
    if panel_rows > 0 and schedule.total_rows > panel_rows * MAX_HEIGHT_SHARE_OF_PANEL:
        messages.append(
            ValidationMessage(
                Severity.WARNING,
                "ARMHOLE_TOO_TALL_FOR_PANEL",
                f"Armhole shaping height ({schedule.total_rows} rows) is more than 60% of "
                f"the panel ({panel_rows} rows)",
            )
        )
    return messages


def summarize_armhole_schedule(schedule: ArmholeSchedule) -> str:
    parts = [
        f"{schedule.kind.value} armhole: bind off {schedule.base_bind_off_stitches} sts "
        f"at the start of the next 2 rows"
    ]
    for action in schedule.actions:
        if action.action_type == ActionType.BIND_OFF:
            continue
        if action.has_repeat:
            parts.append(
                f"dec {action.stitches} st(s) each end every {action.every_n_rows} rows "
                f"x{action.repeat_count}"
            )
        else:
            parts.append(f"dec {action.stitches} st(s) each end once")
    parts.append(f"{schedule.final_panel_stitches} sts remain")
    return ", ".join(parts)


# ── Algorithms ─────────────────────────────────────────────────────────────────


def _base_bind_off(stitches: int) -> ShapingAction:
    return ShapingAction(
        action_type=ActionType.BIND_OFF,
        stitches=stitches,
        row_offset=1,
        side_of_fabric=FabricSide.BOTH,
    )


def _rounded_set_in(
    width: int, ratios: ArmholeRatios
) -> tuple[int, tuple[ShapingAction, ...]]:
    base = round_half_up(width * ratios.base_ratio)
    per_side = (width - base) // 2
    rapid_events = round_half_up(per_side * ratios.rapid_ratio) // 2
    gradual_events = per_side - 2 * rapid_events

    actions: list[ShapingAction] = []
    if base > 0:
        actions.append(_base_bind_off(base))
    row = FIRST_DECREASE_ROW
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
    return base, tuple(actions)


def raglan_decrease_frequency(raglan_rows: int, events: int) -> int:
    """Rows between raglan decreases: clamped to [2, 4], then kept even."""
    if events <= 0:
        return RAGLAN_MIN_FREQUENCY
    return right_side_interval(
        clamp(raglan_rows // events, RAGLAN_MIN_FREQUENCY, RAGLAN_MAX_FREQUENCY)
    )


def _raglan(width: int, raglan_rows: int) -> tuple[int, int, tuple[ShapingAction, ...]]:
    base = clamp(round_half_up(width * RAGLAN_BASE_RATIO), RAGLAN_MIN_BASE, RAGLAN_MAX_BASE)
    total_decrease = max(0, width - base)
    events = math.ceil(total_decrease / RAGLAN_STITCHES_PER_EVENT)
    frequency = raglan_decrease_frequency(raglan_rows, events)
    full_events, odd = divmod(total_decrease, RAGLAN_STITCHES_PER_EVENT)

    actions: list[ShapingAction] = [_base_bind_off(base)]
    row = FIRST_DECREASE_ROW
    if full_events > 0:
        main = ShapingAction(
            action_type=ActionType.DECREASE,
            stitches=RAGLAN_STITCHES_PER_EVENT,
            row_offset=row,
            side_of_fabric=FabricSide.RIGHT_SIDE,
            repeats=full_events,
            every_n_rows=frequency,
        )
        actions.append(main)
        row = main.block_last_row + 1
    if odd:
        actions.append(
            ShapingAction(
                action_type=ActionType.DECREASE,
                stitches=1,
                row_offset=row if row % 2 == 1 else row + 1,
                side_of_fabric=FabricSide.RIGHT_SIDE,
            )
        )
    return base, frequency, tuple(actions)


# ── Validation ─────────────────────────────────────────────────────────────────


def _validate(inp: ArmholeInput) -> Findings:
    findings = Findings()
    check_component_key(findings, inp.component_key)
    gauge_ok = check_gauge(findings, inp.gauge)
    if not isinstance(inp.kind, ArmholeKind):
        findings.error(
            ErrorCode.INVALID_INPUT,
            "UNKNOWN_ARMHOLE_KIND",
            f"Unsupported armhole kind: {inp.kind!r}",
            field="kind",
        )
    depth_ok = check_positive(findings, "depth_cm", inp.depth_cm, "Armhole depth")
    width_ok = check_positive(findings, "width_cm", inp.width_cm, "Armhole width")
    panel_ok = check_positive(
        findings, "panel_width_stitches", inp.panel_width_stitches, "Panel width"
    )
    shoulder_ok = check_positive(
        findings, "shoulder_width_cm", inp.shoulder_width_cm, "Shoulder width"
    )
    raglan_ok = check_optional_positive(
        findings, "raglan_line_length_cm", inp.raglan_line_length_cm, "Raglan line length"
    )

    if depth_ok and inp.depth_cm > MAX_REASONABLE_DEPTH_CM:
        findings.warning(
            "DEEP_ARMHOLE", "Very deep armhole - please verify measurements", field="depth_cm"
        )
    if width_ok and inp.width_cm > MAX_REASONABLE_WIDTH_CM:
        findings.warning(
            "WIDE_ARMHOLE", "Very wide armhole - please verify measurements", field="width_cm"
        )
    if (
        raglan_ok
        and depth_ok
        and inp.raglan_line_length_cm is not None
        and inp.raglan_line_length_cm < inp.depth_cm
    ):
        findings.warning(
            "SHORT_RAGLAN_LINE",
            "Raglan line length should typically be at least equal to armhole depth",
            field="raglan_line_length_cm",
        )
    if gauge_ok and panel_ok and shoulder_ok:
        if 2 * cm_to_stitches(inp.shoulder_width_cm, inp.gauge) >= inp.panel_width_stitches:
            findings.warning(
                "WIDE_SHOULDERS",
                "Shoulder width seems very large relative to panel width",
                field="shoulder_width_cm",
            )
    if gauge_ok and panel_ok and width_ok:
        width_stitches = cm_to_stitches(inp.width_cm, inp.gauge)
        if width_stitches >= inp.panel_width_stitches * MAX_WIDTH_SHARE_OF_PANEL:
            findings.warning(
                "ARMHOLE_WIDE_FOR_PANEL",
                "Armhole width seems very large relative to panel width",
                field="width_cm",
            )
    return findings


# ── Public entry point ─────────────────────────────────────────────────────────


def calculate_armhole_shaping(
    data: Union[ArmholeInput, Mapping[str, Any]],
) -> CalculationResult[ArmholeSchedule]:
    """
    Calculate armhole shaping for both edges of one panel.

    Parameters
    ----------
    data:
        An ArmholeInput, or a mapping with the same fields.

    Returns
    -------
    CalculationResult[ArmholeSchedule]
        The schedule's first action is always the base bind-off; later
        actions are decreases worked at both ends of right-side rows.
    """
    inp, error = resolve_input(ArmholeInput, data)
    if error is not None:
        return failed(error, "armhole", log=logger)
    assert inp is not None

    findings = _validate(inp)
    if findings.has_errors:
        return failed(findings.to_validation_error(), "armhole", inp.component_key, logger)

    width = cm_to_stitches(inp.width_cm, inp.gauge)
    shoulder = cm_to_stitches(inp.shoulder_width_cm, inp.gauge)
    frequency: Optional[int] = None

    if inp.kind == ArmholeKind.RAGLAN:
        algorithm = ALGORITHM_RAGLAN
        total_rows = cm_to_rows(inp.raglan_line_length_cm or inp.depth_cm, inp.gauge)
        base, frequency, actions = _raglan(width, total_rows)
    else:
        algorithm = ALGORITHM_ROUNDED
        total_rows = cm_to_rows(inp.depth_cm, inp.gauge)
        base, actions = _rounded_set_in(width, inp.ratios or ROUNDED_ARMHOLE_RATIOS)

    schedule = ArmholeSchedule(
        kind=inp.kind,
        base_bind_off_stitches=base,
        actions=actions,
        total_rows=total_rows,
        final_stitches_at_shoulder_edge=shoulder,
        panel_stitches=inp.panel_width_stitches,
    )
    logger.debug(
        f"{algorithm}: W={width} base={base} rows={total_rows} "
        f"removed_each_edge={schedule.stitches_removed_each_edge}"
    )

    if schedule.final_panel_stitches < 1:
        findings.error(
            ErrorCode.INVALID_DIMENSION,
            "ARMHOLE_CONSUMES_PANEL",
            f"Armhole shaping removes {2 * schedule.stitches_removed_each_edge} sts from a "
            f"{inp.panel_width_stitches}-st panel",
            field="width_cm",
        )
        return failed(findings.to_validation_error(), "armhole", inp.component_key, logger)

    derived: dict[str, Any] = {
        "armhole_width_stitches": width,
        "stitches_removed_each_edge": schedule.stitches_removed_each_edge,
        "final_panel_stitches": schedule.final_panel_stitches,
    }
    if frequency is not None:
        derived["decrease_frequency"] = frequency
    return succeeded(schedule, findings, algorithm, inp, derived=derived, log=logger)
