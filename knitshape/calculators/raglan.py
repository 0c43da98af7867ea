"""
Top-down raglan calculator.

The yoke is cast on at the neckline and worked in the round. Four raglan
lines divide it into back, front and two sleeves; every increase round adds
one stitch on each side of every raglan line, 8 stitches in all. When the
yoke is deep enough the sleeves go onto holders, underarm stitches are cast
on and the body continues alone.

Increase accounting is exact: the number of rounds is set by whichever of
body or sleeves needs more, every round adds 2 sts to each of front, back and
both sleeves, and the separation counts are derived from the rounds actually
worked. Where that overshoots a target the result carries a warning instead
of silently redistributing stitches.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Union

from knitshape.schemas.inputs import RaglanInput
from knitshape.schemas.results import CalculationResult, ErrorCode
from knitshape.schemas.schedule import (
    RAGLAN_LINES,
    RaglanDistribution,
    RaglanSchedule,
    RaglanSeparation,
    RaglanShaping,
)
from knitshape.utilities.conversion import (
    clamp,
    cm_to_rows,
    cm_to_stitches,
    round_half_up,
    stitches_to_cm,
)
from knitshape.utilities.types import Gauge

from .common import (
    Findings,
    check_component_key,
    check_gauge,
    check_positive,
    failed,
    resolve_input,
    succeeded,
)

logger = logging.getLogger(__name__)

ALGORITHM = "raglan-top-down"

STITCHES_PER_ROUND = 2 * RAGLAN_LINES
# Per round: front and back each gain 2, so the body gains 4; each sleeve gains 2.
BODY_STITCHES_PER_ROUND = 4
SLEEVE_STITCHES_PER_ROUND = 2

MAX_RAGLAN_LINE_STITCHES = 6
YOKE_DEPTH_ALLOWANCE_CM = 12.0
UNDERARM_CAST_ON_CM = 2.5
STANDARD_INCREASE_FREQUENCY = 2
MIN_INCREASE_FREQUENCY = 2
MAX_INCREASE_FREQUENCY = 4

NECKLINE_TOLERANCE_CM = 1.0
BODY_TOLERANCE_CM = 2.0
SLEEVE_TOLERANCE_CM = 1.5


def distribute_cast_on(cast_on: int, raglan_line_stitches: int) -> RaglanDistribution:
    """
    Split the neckline cast-on into back, front, sleeves and raglan lines.

    Back and front take about a third each of the stitches left after the
    raglan lines, each sleeve about a sixth. The back absorbs the rounding
    remainder so the parts always sum to *cast_on*.
    """
    available = cast_on - RAGLAN_LINES * raglan_line_stitches
    front = round_half_up(available / 3)
    back = front
    sleeve = round_half_up(available / 6)
    back += available - (front + back + 2 * sleeve)
    return RaglanDistribution(
        back=back,
        front=front,
        sleeve_left=sleeve,
        sleeve_right=sleeve,
        raglan_line_each=raglan_line_stitches,
    )


def increase_rounds_needed(body_increases: int, sleeve_increases: int) -> int:
    """Rounds required so that both body and sleeves reach their targets."""
    body_rounds = math.ceil(body_increases / BODY_STITCHES_PER_ROUND)
    sleeve_rounds = math.ceil(sleeve_increases / SLEEVE_STITCHES_PER_ROUND)
    return max(body_rounds, sleeve_rounds, 0)


def increase_frequency(line_length_rows: int, rounds: int) -> int:
    if rounds <= 0:
        return STANDARD_INCREASE_FREQUENCY
    return clamp(line_length_rows // rounds, MIN_INCREASE_FREQUENCY, MAX_INCREASE_FREQUENCY)


def underarm_cast_on(gauge: Gauge) -> int:
    """Underarm cast-on for 2.5 cm, bumped to an even count so it splits evenly."""
    stitches = cm_to_stitches(UNDERARM_CAST_ON_CM, gauge)
    return stitches + 1 if stitches % 2 else stitches


def separation_counts(
    distribution: RaglanDistribution, rounds: int, underarm: int
) -> RaglanSeparation:
    """
    Live counts when the sleeves leave the body.

    Each raglan line's stitches are shared half and half between the body
    and the neighbouring sleeve.
    """
    gain = SLEEVE_STITCHES_PER_ROUND * rounds
    line = distribution.raglan_line_each
    front = distribution.front + gain + line
    back = distribution.back + gain + line
    return RaglanSeparation(
        body_total_stitches=front + back,
        sleeve_each_stitches=distribution.sleeve_left + gain + line,
        underarm_cast_on_stitches=underarm,
        front_stitches=front,
        back_stitches=back,
    )


# ── Validation ─────────────────────────────────────────────────────────────────

_DIMENSIONS = (
    ("bust_circumference_cm", "Bust circumference"),
    ("body_length_cm", "Body length"),
    ("sleeve_length_cm", "Sleeve length"),
    ("upper_arm_circumference_cm", "Upper arm circumference"),
    ("neckline_depth_cm", "Neckline depth"),
    ("neckline_circumference_cm", "Neckline circumference"),
)


def _validate(inp: RaglanInput) -> Findings:
    findings = Findings()
    check_component_key(findings, inp.component_key)
    check_gauge(findings, inp.gauge)
    for name, label in _DIMENSIONS:
        check_positive(findings, name, getattr(inp, name), label)

    rl = inp.raglan_line_stitches
    if not isinstance(rl, int) or isinstance(rl, bool) or rl <= 0:
        findings.error(
            ErrorCode.INVALID_INPUT,
            "RAGLAN_LINE_INVALID",
            f"Raglan line width must be a positive whole number of stitches, got {rl!r}",
            field="raglan_line_stitches",
        )
    elif rl > MAX_RAGLAN_LINE_STITCHES:
        findings.error(
            ErrorCode.INVALID_INPUT,
            "RAGLAN_LINE_TOO_WIDE",
            f"Raglan line width of {rl} sts exceeds the maximum of {MAX_RAGLAN_LINE_STITCHES}",
            field="raglan_line_stitches",
            suggestion="Use 1-4 sts for a raglan line; wider lines read as a panel",
        )

    for name in ("neckline_cm", "body_cm", "sleeve_cm"):
        value = getattr(inp.ease, name)
        if not isinstance(value, (int, float)) or value < 0:
            findings.error(
                ErrorCode.INVALID_INPUT,
                "NEGATIVE_EASE",
                f"Ease {name} must be >= 0, got {value!r}",
                field=f"ease.{name}",
            )
    return findings


def _check_deviation(
    findings: Findings, code: str, label: str, actual_cm: float, target_cm: float, limit: float
) -> None:
    if abs(actual_cm - target_cm) > limit:
        findings.warning(
            code,
            f"{label} deviates from target: {actual_cm:.1f} cm actual vs {target_cm:.1f} cm target",
        )


# ── Public entry point ─────────────────────────────────────────────────────────


def calculate_raglan_shaping(
    data: Union[RaglanInput, Mapping[str, Any]],
) -> CalculationResult[RaglanSchedule]:
    """
    Calculate a top-down raglan yoke from neckline to sleeve separation.

    Parameters
    ----------
    data:
        A RaglanInput, or a mapping with the same fields. ``ease`` may be a
        mapping of ``neckline_cm`` / ``body_cm`` / ``sleeve_cm``.

    Returns
    -------
    CalculationResult[RaglanSchedule]
        The distribution always sums to the neckline cast-on, and the live
        count at separation is exactly ``cast_on + 8 * rounds``.
    """
    inp, error = resolve_input(RaglanInput, data)
    if error is not None:
        return failed(error, "raglan", log=logger)
    assert inp is not None

    findings = _validate(inp)
    if findings.has_errors:
        return failed(findings.to_validation_error(), "raglan", inp.component_key, logger)

    gauge = inp.gauge
    neckline_target_cm = inp.neckline_circumference_cm + inp.ease.neckline_cm
    cast_on = cm_to_stitches(neckline_target_cm, gauge)
    if cast_on - RAGLAN_LINES * inp.raglan_line_stitches < 6:
        findings.error(
            ErrorCode.INVALID_DIMENSION,
            "NECKLINE_TOO_SMALL",
            f"Neckline cast-on of {cast_on} sts leaves too few stitches after "
            f"{RAGLAN_LINES} raglan lines of {inp.raglan_line_stitches} sts",
            field="neckline_circumference_cm",
        )
        return failed(findings.to_validation_error(), "raglan", inp.component_key, logger)

    distribution = distribute_cast_on(cast_on, inp.raglan_line_stitches)

    body_target_cm = inp.bust_circumference_cm + inp.ease.body_cm
    sleeve_target_cm = inp.upper_arm_circumference_cm + inp.ease.sleeve_cm
    target_body = cm_to_stitches(body_target_cm, gauge)
    target_sleeve = cm_to_stitches(sleeve_target_cm, gauge)

    body_increases = max(0, target_body - (distribution.front + distribution.back))
    sleeve_increases = max(0, target_sleeve - distribution.sleeve_left)
    rounds = increase_rounds_needed(body_increases, sleeve_increases)

    line_length = cm_to_rows(inp.neckline_depth_cm + YOKE_DEPTH_ALLOWANCE_CM, gauge)
    frequency = increase_frequency(line_length, rounds)
    underarm = underarm_cast_on(gauge)

    separation = separation_counts(distribution, rounds, underarm)
    shaping = RaglanShaping(
        line_length_rows=line_length,
        increase_frequency=frequency,
        total_increase_rounds=rounds,
        increases_per_sleeve=SLEEVE_STITCHES_PER_ROUND * rounds,
        increases_per_body_panel=SLEEVE_STITCHES_PER_ROUND * rounds,
        stitches_per_round=STITCHES_PER_ROUND,
    )
    schedule = RaglanSchedule(
        neckline_cast_on_total=cast_on,
        initial_distribution=distribution,
        raglan_shaping=shaping,
        separation=separation,
        target_body_stitches=target_body,
        target_sleeve_stitches=target_sleeve,
    )
    logger.debug(
        f"{ALGORITHM}: cast_on={cast_on} rounds={rounds} every={frequency} "
        f"body={separation.body_total_stitches} sleeve={separation.sleeve_each_stitches}"
    )

    # Round 1 sets up the markers; increase rounds start on round 2.
    rows_needed = 1 + rounds * frequency
    if rounds and rows_needed > line_length:
        findings.warning(
            "INCREASES_EXCEED_LINE",
            f"{rounds} increase rounds every {frequency} rounds need {rows_needed} rounds "
            f"but the raglan line is {line_length} rounds long",
            suggestion="Deepen the yoke or reduce ease",
        )
    _check_deviation(
        findings,
        "NECKLINE_DEVIATION",
        "Neckline",
        stitches_to_cm(cast_on, gauge),
        neckline_target_cm,
        NECKLINE_TOLERANCE_CM,
    )
    _check_deviation(
        findings,
        "BODY_DEVIATION",
        "Body circumference",
        stitches_to_cm(separation.body_after_underarm, gauge),
        body_target_cm,
        BODY_TOLERANCE_CM,
    )
    _check_deviation(
        findings,
        "SLEEVE_DEVIATION",
        "Upper arm circumference",
        stitches_to_cm(separation.sleeve_each_stitches, gauge),
        sleeve_target_cm,
        SLEEVE_TOLERANCE_CM,
    )

    return succeeded(
        schedule,
        findings,
        ALGORITHM,
        inp,
        derived={
            "stitches_before_separation": schedule.stitches_before_separation,
            "body_after_underarm": separation.body_after_underarm,
            "actual_body_cm": round(stitches_to_cm(separation.body_after_underarm, gauge), 1),
            "actual_sleeve_cm": round(stitches_to_cm(separation.sleeve_each_stitches, gauge), 1),
        },
        log=logger,
    )
