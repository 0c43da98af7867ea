"""
Hammer-sleeve rendering: the sleeve with its cap and shoulder extension,
the front/back panel with its rectangular cutout and shoulder straps, then
assembly. Each piece restarts its own row numbering.
"""

from __future__ import annotations

from knitshape.schemas.results import ErrorCode
from knitshape.schemas.schedule import HammerSleeveSchedule
from knitshape.terminology import TermKey

from .fold import (
    RenderContext,
    RenderState,
    ScheduleError,
    bind_off_row,
    emit,
    plain_rows,
    render_action,
    require_count,
)
from .instructions import DetailedInstruction, InstructionType
from .templates import edge_decrease_both


def _check(schedule: HammerSleeveSchedule) -> None:
    for part in ("extension", "vertical_part", "body_panel"):
        if getattr(schedule, part) is None:
            raise ScheduleError(
                ErrorCode.MISSING_CALCULATIONS, f"Hammer sleeve {part} is missing", part
            )
    require_count(schedule.vertical_part.width_stitches, "vertical_part.width_stitches", 1)
    require_count(schedule.vertical_part.height_rows, "vertical_part.height_rows")
    require_count(schedule.extension.width_stitches, "extension.width_stitches", 1)
    require_count(schedule.extension.length_rows, "extension.length_rows", 1)
    body = schedule.body_panel
    require_count(body.body_width_at_chest_stitches, "body_panel.body_width_at_chest_stitches", 1)
    require_count(body.shoulder_strap_width_stitches, "body_panel.shoulder_strap_width_stitches", 1)
    require_count(body.bind_off_for_cutout_stitches, "body_panel.bind_off_for_cutout_stitches")
    require_count(body.armhole_depth_rows, "body_panel.armhole_depth_rows")
    require_count(schedule.sleeve_rows_to_cap, "sleeve_rows_to_cap")
    require_count(schedule.body_rows_to_armhole, "body_rows_to_armhole")


def _header(
    state: RenderState, ctx: RenderContext, key: TermKey
) -> tuple[RenderState, DetailedInstruction]:
    return emit(state, ctx, InstructionType.SETUP_ROW, ctx.phrases.text(key), count_clause=False)


def _render_sleeve(
    state: RenderState, schedule: HammerSleeveSchedule, ctx: RenderContext, warnings: list[str]
) -> tuple[RenderState, list[DetailedInstruction]]:
    pb = ctx.phrases
    width = schedule.vertical_part.width_stitches
    extension = schedule.extension
    ctx = ctx.replace(section="sleeve")

    instructions: list[DetailedInstruction] = []
    state, instruction = _header(state, ctx, TermKey.SECTION_SLEEVE)
    instructions.append(instruction)
    state = RenderState(step=state.step, stitch_count=width)
    state, instruction = emit(state, ctx, InstructionType.CAST_ON, pb.cast_on(width), count=width)
    instructions.append(instruction)

    state, out = plain_rows(state, ctx, schedule.sleeve_rows_to_cap)
    instructions.extend(out)
    cap_end = state.row + schedule.vertical_part.height_rows
    state, out = plain_rows(state, ctx.replace(section="sleeve_cap"), cap_end)
    instructions.extend(out)

    excess = width - extension.width_stitches
    if excess > 0:
        first = (excess + 1) // 2
        for stitches in (first, excess - first):
            if stitches:
                state, instruction = bind_off_row(state, ctx, state.row + 1, stitches)
                instructions.append(instruction)
    elif excess < 0:
        warnings.append(
            f"Shoulder extension ({extension.width_stitches} sts) is wider than the sleeve cap "
            f"({width} sts); the extension is worked on all {width} sts"
        )

    live = state.stitch_count
    state, instruction = emit(
        state,
        ctx.replace(section="extension"),
        InstructionType.PLAIN_ROW,
        pb.text(TermKey.HAMMER_EXTENSION, count=live, rows=extension.length_rows),
        position=state.row + 1,
        count=live,
        count_clause=False,
        rows=extension.length_rows,
    )
    instructions.append(instruction)
    state = state.at_row(state.row + extension.length_rows)

    state, instruction = emit(
        state,
        ctx,
        InstructionType.BIND_OFF,
        pb.text(TermKey.BIND_OFF_ALL, count=live),
        position=state.row + 1,
        count=0,
        count_clause=False,
        stitch_delta=-live,
    )
    instructions.append(instruction)
    return state, instructions


def _render_body(
    state: RenderState, schedule: HammerSleeveSchedule, ctx: RenderContext
) -> tuple[RenderState, list[DetailedInstruction]]:
    pb = ctx.phrases
    body = schedule.body_panel
    width = body.body_width_at_chest_stitches
    ctx = ctx.replace(section="body")

    instructions: list[DetailedInstruction] = []
    state, instruction = _header(state, ctx, TermKey.SECTION_BODY)
    instructions.append(instruction)
    state = RenderState(step=state.step, stitch_count=width)
    state, instruction = emit(state, ctx, InstructionType.CAST_ON, pb.cast_on(width), count=width)
    instructions.append(instruction)
    state, out = plain_rows(state, ctx, schedule.body_rows_to_armhole)
    instructions.extend(out)

    cutout = schedule.cutout_action
    if cutout is not None:
        cutout_ctx = ctx.replace(edges=2, row_shift=state.row, section="cutout")
        state, out = render_action(state, cutout, cutout_ctx, edge_decrease_both)
        instructions.extend(out)

    strap = body.shoulder_strap_width_stitches
    held = state.stitch_count - strap
    if held < 0:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Only {state.stitch_count} sts remain after the cutout; each strap needs {strap}",
            "body_panel.shoulder_strap_width_stitches",
        )
    if held != strap:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Straps do not split evenly: {strap} sts left strap, {held} sts right strap",
            "body_panel.shoulder_strap_width_stitches",
        )
    state, instruction = emit(
        state,
        ctx,
        InstructionType.SETUP_ROW,
        pb.text(TermKey.HAMMER_DIVIDE, count=strap, held=held),
        count=strap,
        count_clause=False,
        held_stitches=held,
    )
    instructions.append(instruction)

    strap_start = state.row + 1
    rows = body.armhole_depth_rows
    for key, section in (
        (TermKey.HAMMER_LEFT_STRAP, "left_strap"),
        (TermKey.HAMMER_RIGHT_STRAP, "right_strap"),
    ):
        state, instruction = emit(
            state,
            ctx.replace(section=section),
            InstructionType.PLAIN_ROW,
            pb.text(key, count=strap, rows=rows),
            position=strap_start,
            count=strap,
            count_clause=False,
            rows=rows,
        )
        instructions.append(instruction)
    return state.at_row(strap_start + rows - 1), instructions


def render_hammer_sleeve(
    schedule: HammerSleeveSchedule, ctx: RenderContext, warnings: list[str]
) -> list[DetailedInstruction]:
    _check(schedule)
    instructions: list[DetailedInstruction] = []
    state = RenderState()

    state, out = _render_sleeve(state, schedule, ctx, warnings)
    instructions.extend(out)
    state, out = _render_body(state, schedule, ctx)
    instructions.extend(out)

    assembly_ctx = ctx.replace(section="assembly")
    state, instruction = _header(state, assembly_ctx, TermKey.SECTION_ASSEMBLY)
    instructions.append(instruction)
    for key in (TermKey.ASSEMBLY_SHOULDER, TermKey.ASSEMBLY_CAP, TermKey.ASSEMBLY_SEAMS):
        state, instruction = emit(
            state, assembly_ctx, InstructionType.FINISHING, ctx.phrases.text(key), count_clause=False
        )
        instructions.append(instruction)
    return instructions
