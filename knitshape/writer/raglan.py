"""
Top-down raglan rendering.

Cast on at the neckline and join; round 1 places the markers; increase
rounds start on round 2 and repeat on the yoke's cadence; the yoke is then
worked even to the full raglan depth and the sleeves are separated from the
body.
"""

from __future__ import annotations

from knitshape.schemas.results import ErrorCode
from knitshape.schemas.schedule import RAGLAN_LINES, RaglanSchedule
from knitshape.terminology import TermKey

from .fold import (
    RenderContext,
    RenderState,
    ScheduleError,
    emit,
    plain_rows,
    render_action,
    require_count,
)
from .instructions import DetailedInstruction, InstructionType
from .templates import raglan_increase_round


def _check(schedule: RaglanSchedule) -> None:
    if schedule.raglan_shaping is None:
        raise ScheduleError(
            ErrorCode.MISSING_CALCULATIONS, "Raglan shaping is missing", "raglan_shaping"
        )
    if schedule.separation is None:
        raise ScheduleError(ErrorCode.MISSING_CALCULATIONS, "Separation is missing", "separation")
    require_count(schedule.neckline_cast_on_total, "neckline_cast_on_total", minimum=1)
    shaping = schedule.raglan_shaping
    require_count(shaping.line_length_rows, "raglan_shaping.line_length_rows")
    require_count(shaping.total_increase_rounds, "raglan_shaping.total_increase_rounds")
    require_count(shaping.increase_frequency, "raglan_shaping.increase_frequency", minimum=1)
    separation = schedule.separation
    for name in ("body_total_stitches", "sleeve_each_stitches", "underarm_cast_on_stitches"):
        require_count(getattr(separation, name), f"separation.{name}")


def render_raglan(
    schedule: RaglanSchedule, ctx: RenderContext, warnings: list[str]
) -> list[DetailedInstruction]:
    _check(schedule)
    pb = ctx.phrases
    distribution = schedule.initial_distribution
    separation = schedule.separation
    cast_on = schedule.neckline_cast_on_total

    ctx = ctx.replace(in_rounds=True, edges=RAGLAN_LINES)
    state = RenderState(stitch_count=cast_on)
    instructions: list[DetailedInstruction] = []

    body = pb.with_note(pb.cast_on(cast_on, in_rounds=True), pb.text(TermKey.NOTE_NO_TWIST))
    state, instruction = emit(state, ctx, InstructionType.CAST_ON, body, count=cast_on)
    instructions.append(instruction)

    markers = pb.text(
        TermKey.RAGLAN_MARKERS,
        back=distribution.back,
        front=distribution.front,
        sleeve=distribution.sleeve_left,
        line=distribution.raglan_line_each,
    )
    state, instruction = emit(
        state,
        ctx,
        InstructionType.SETUP_ROW,
        markers,
        label=pb.row_label(1, in_rounds=True),
        position=1,
        count=cast_on,
        markers=2 * RAGLAN_LINES,
    )
    instructions.append(instruction)
    state = state.at_row(1)

    action = schedule.increase_action
    if action is not None:
        state, out = render_action(state, action, ctx, raglan_increase_round)
        instructions.extend(out)
    line_length = schedule.raglan_shaping.line_length_rows
    state, out = plain_rows(state, ctx, line_length)
    instructions.extend(out)
    if state.row > line_length:
        warnings.append(
            f"Increase rounds run to round {state.row}, past the raglan line of {line_length} rounds"
        )

    if state.stitch_count != schedule.stitches_before_separation:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Yoke ends with {state.stitch_count} sts but the schedule expects "
            f"{schedule.stitches_before_separation}",
        )
    accounted = separation.body_total_stitches + 2 * separation.sleeve_each_stitches
    if accounted != state.stitch_count:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Separation accounts for {accounted} sts but the yoke has {state.stitch_count}",
            "separation",
        )

    round_number = state.row + 1
    body = pb.text(
        TermKey.SEPARATION,
        back=separation.back_stitches,
        front=separation.front_stitches,
        sleeve=separation.sleeve_each_stitches,
        underarm=separation.underarm_cast_on_stitches,
    )
    state, instruction = emit(
        state,
        ctx,
        InstructionType.SEPARATION,
        body,
        label=pb.row_label(round_number, in_rounds=True),
        position=round_number,
        count=separation.body_after_underarm,
        sleeve_stitches_each=separation.sleeve_each_stitches,
        underarm_cast_on=separation.underarm_cast_on_stitches,
    )
    instructions.append(instruction)
    return instructions
