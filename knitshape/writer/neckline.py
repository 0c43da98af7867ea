"""
Neckline rendering.

Row 1 binds off the center and divides the work. The side with the yarn
still attached (the left side of the neck, facing the right side of the
fabric) is worked first; the first group of stitches goes on hold and is
rejoined afterwards. Both sides follow the same action list, offset by two
rows so that their first shaping row is row 3, a right-side row.
"""

from __future__ import annotations

from knitshape.schemas.results import ErrorCode
from knitshape.schemas.schedule import NecklineSchedule, ShapingAction
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
from .templates import Describer, neck_decrease_at_end, neck_decrease_at_start

# Division row plus the wrong-side row that follows it.
SIDE_ROW_SHIFT = 2


def _render_side(
    state: RenderState,
    actions: tuple[ShapingAction, ...],
    total_rows: int,
    ctx: RenderContext,
    describe: Describer,
) -> tuple[RenderState, list[DetailedInstruction]]:
    instructions: list[DetailedInstruction] = []
    for action in actions:
        state, out = render_action(state, action, ctx, describe)
        instructions.extend(out)
    state, out = plain_rows(state, ctx, total_rows + SIDE_ROW_SHIFT)
    instructions.extend(out)
    return state, instructions


def render_neckline(
    schedule: NecklineSchedule, ctx: RenderContext, warnings: list[str]
) -> list[DetailedInstruction]:
    panel = require_count(schedule.panel_stitches, "panel_stitches", minimum=1)
    center = require_count(schedule.center_bind_off_stitches, "center_bind_off_stitches")
    require_count(schedule.total_rows, "total_rows")
    if center > panel:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Center bind-off ({center} sts) is wider than the panel ({panel} sts)",
            "center_bind_off_stitches",
        )

    pb = ctx.phrases
    held = (panel - center) // 2
    working = panel - center - held
    side_ctx = ctx.replace(count_key=TermKey.STITCH_COUNT_SIDE)

    state = RenderState(stitch_count=panel)
    instructions: list[DetailedInstruction] = []

    body = pb.text(TermKey.CENTER_DIVISION, first=held, center=center)
    body = pb.with_note(body, pb.text(TermKey.NOTE_HOLD, count=held))
    state, instruction = emit(
        state,
        side_ctx,
        InstructionType.BIND_OFF,
        body,
        label=pb.row_label(1),
        position=1,
        count=working,
        side="RS",
        stitch_delta=-center,
        held_stitches=held,
    )
    instructions.append(instruction)
    state = state.at_row(1)

    # ── Left side ──────────────────────────────────────────────────────────────
    left_ctx = side_ctx.replace(row_shift=SIDE_ROW_SHIFT, section="left")
    state, instruction = emit(
        state,
        left_ctx,
        InstructionType.SETUP_ROW,
        pb.text(TermKey.NECK_LEFT_SETUP, count=working),
        count=working,
        count_clause=False,
    )
    instructions.append(instruction)
    state, out = _render_side(
        state, schedule.left_side, schedule.total_rows, left_ctx, neck_decrease_at_start
    )
    instructions.extend(out)
    left_final = state.stitch_count

    # ── Right side ─────────────────────────────────────────────────────────────
    right_ctx = side_ctx.replace(row_shift=SIDE_ROW_SHIFT, section="right")
    state = state.at_row(1)
    body = pb.with_note(
        pb.text(TermKey.NECK_RIGHT_SETUP, count=held), pb.text(TermKey.NOTE_MIRROR)
    )
    state, instruction = emit(
        state,
        right_ctx,
        InstructionType.SETUP_ROW,
        body,
        count=held,
        count_clause=False,
    )
    instructions.append(instruction)
    state, out = _render_side(
        state, schedule.right_side, schedule.total_rows, right_ctx, neck_decrease_at_end
    )
    instructions.extend(out)

    if left_final != state.stitch_count:
        warnings.append(
            f"Left side ends with {left_final} sts and right side with {state.stitch_count} sts; "
            f"the panel does not split evenly around the center bind-off"
        )
    return instructions
