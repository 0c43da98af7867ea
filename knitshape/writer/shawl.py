"""Triangular shawl rendering: cast on, one shaping run per phase, bind off."""

from __future__ import annotations

import dataclasses

from knitshape.schemas.results import ErrorCode
from knitshape.schemas.schedule import (
    ActionType,
    ShapingAction,
    ShawlPhase,
    ShawlSchedule,
    WorkStyle,
)
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
from .templates import (
    Describer,
    center_spine_increase,
    edge_decrease_both,
    edge_increase_both,
    single_edge_decrease,
    single_edge_increase,
)


def _phase_shaping(
    phase: ShawlPhase, action: ShapingAction, ctx: RenderContext
) -> tuple[ShapingAction, RenderContext, Describer]:
    """Pick the describer for a phase and split its per-event change across edges."""
    match (phase.action_type, phase.stitches_per_event):
        case (ActionType.INCREASE, 4):
            return action, ctx.replace(edges=1), center_spine_increase
        case (ActionType.INCREASE, 2):
            return dataclasses.replace(action, stitches=1), ctx.replace(edges=2), edge_increase_both
        case (ActionType.INCREASE, 1):
            return action, ctx.replace(edges=1), single_edge_increase
        case (ActionType.DECREASE, 2):
            return dataclasses.replace(action, stitches=1), ctx.replace(edges=2), edge_decrease_both
        case (ActionType.DECREASE, 1):
            return action, ctx.replace(edges=1), single_edge_decrease
    raise ScheduleError(
        ErrorCode.UNSUPPORTED_COMBINATION,
        f"Shawl phase {phase.name!r}: no instruction for {phase.action_type.value} "
        f"of {phase.stitches_per_event} sts per shaping row",
        "phases",
    )


def render_shawl(
    schedule: ShawlSchedule, ctx: RenderContext, warnings: list[str]
) -> list[DetailedInstruction]:
    require_count(schedule.cast_on_stitches, "cast_on_stitches", minimum=1)
    border = require_count(schedule.border_stitches_each_side, "border_stitches_each_side")
    pb = ctx.phrases
    in_rounds = schedule.work_style == WorkStyle.IN_THE_ROUND
    ctx = ctx.replace(in_rounds=in_rounds)

    start = schedule.starting_stitches
    state = RenderState(stitch_count=start)
    instructions: list[DetailedInstruction] = []

    body = pb.cast_on(start, in_rounds=in_rounds)
    if border:
        body = pb.with_note(body, pb.text(TermKey.NOTE_BORDER, count=border))
    state, instruction = emit(state, ctx, InstructionType.CAST_ON, body, count=start)
    instructions.append(instruction)

    phase_start = 0
    for index, phase in enumerate(schedule.phases):
        rows = require_count(phase.total_rows_in_phase, f"phases[{index}].total_rows_in_phase")
        phase_ctx = ctx.replace(row_shift=phase_start, section=phase.name)
        action = phase.to_action()
        if action is not None:
            action, phase_ctx, describe = _phase_shaping(phase, action, phase_ctx)
            state, out = render_action(state, action, phase_ctx, describe)
            instructions.extend(out)
        phase_end = phase_start + rows
        if state.row > phase_end:
            warnings.append(
                f"Shaping for phase {phase.name!r} runs to row {state.row}, "
                f"past the phase end at row {phase_end}"
            )
        state, out = plain_rows(state, phase_ctx, phase_end)
        instructions.extend(out)
        phase_start = max(phase_end, state.row)

    expected = schedule.final_stitch_count + 2 * border
    if state.stitch_count != expected:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Shawl ends with {state.stitch_count} sts but the schedule expects {expected}",
            "final_stitch_count",
        )

    last = state.row + 1
    state, instruction = emit(
        state,
        ctx,
        InstructionType.BIND_OFF,
        pb.text(TermKey.BIND_OFF_ALL, count=state.stitch_count),
        label=pb.row_label(last, in_rounds),
        position=last,
        count=0,
        count_clause=False,
        stitch_delta=-state.stitch_count,
    )
    instructions.append(instruction)
    return instructions
