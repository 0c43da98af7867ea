"""
The rendering fold.

Rendering is an explicit left fold over a schedule's actions. RenderState is
the accumulator (last step number, last row worked, live stitch count); each
step returns a new state together with the instructions it produced, so an
action can be rendered and tested on its own:

    state, instructions = render_action(state, action, ctx, describe)

Row numbers in a RenderState are absolute within the piece being rendered.
Actions carry phase-relative row offsets; RenderContext.row_shift maps them
onto absolute rows.

A schedule that cannot be rendered (overlapping actions, a count that would
go negative, an unsupported shape) raises ScheduleError, which the
render_instructions boundary turns into a RenderError.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Optional

from knitshape.schemas.results import ErrorCode
from knitshape.schemas.schedule import ActionType, FabricSide, ShapingAction
from knitshape.terminology import TermKey

from .instructions import DetailedInstruction, InstructionType
from .templates import Describer, Phrasebook, side_for_row


class ScheduleError(Exception):
    """A schedule that cannot be rendered."""

    def __init__(self, code: ErrorCode, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field


@dataclass(frozen=True)
class RenderState:
    step: int = 0
    row: int = 0
    stitch_count: int = 0

    def at_row(self, row: int) -> RenderState:
        return dataclasses.replace(self, row=row)


@dataclass(frozen=True)
class RenderContext:
    """
    Everything about the current piece that does not change row to row.

    ``edges`` is how many times an action's per-edge stitch change applies
    per occurrence: 1 for a neckline side, 2 for both armhole edges, 4 for
    the raglan lines of a yoke.
    """

    phrases: Phrasebook
    in_rounds: bool = False
    edges: int = 1
    row_shift: int = 0
    count_key: TermKey = TermKey.STITCH_COUNT
    section: Optional[str] = None

    def replace(self, **changes: Any) -> RenderContext:
        return dataclasses.replace(self, **changes)


# ── Schedule field checks ──────────────────────────────────────────────────────


def require_count(value: Any, field: str, minimum: int = 0) -> int:
    """Return *value* if it is a whole number >= *minimum*, else raise ScheduleError."""
    if value is None:
        raise ScheduleError(
            ErrorCode.MISSING_CALCULATIONS, f"Schedule field {field} is missing", field
        )
    if not isinstance(value, int) or isinstance(value, bool):
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Schedule field {field} must be a whole number, got {value!r}",
            field,
        )
    if value < minimum:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Schedule field {field} must be >= {minimum}, got {value}",
            field,
        )
    return value


def _apply(count: int, delta: int) -> int:
    after = count + delta
    if after < 0:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Stitch count would drop below zero ({count} sts, change of {delta})",
        )
    return after


# ── Emitting ───────────────────────────────────────────────────────────────────


def emit(
    state: RenderState,
    ctx: RenderContext,
    kind: InstructionType,
    body: str,
    *,
    label: Optional[str] = None,
    position: Optional[int] = None,
    count: Optional[int] = None,
    count_clause: bool = True,
    **metadata: Any,
) -> tuple[RenderState, DetailedInstruction]:
    """
    Build one instruction and advance the step counter.

    *count* is the true live count after the instruction, or None for
    instructions that do not touch live stitches. It is tracked in the
    state regardless of config; whether it is shown is up to the config.
    """
    pb = ctx.phrases
    text = pb.line(label, body) if label else body
    if count_clause:
        text = pb.with_count(text, count, ctx.count_key)
    if ctx.section is not None:
        metadata.setdefault("section", ctx.section)

    step = state.step + 1
    instruction = DetailedInstruction(
        step=step,
        row_number=None if ctx.in_rounds else position,
        round_number=position if ctx.in_rounds else None,
        instruction_type=kind,
        text=text,
        stitch_count_after=count if pb.config.include_stitch_counts else None,
        metadata=metadata,
    )
    new_count = state.stitch_count if count is None else count
    return dataclasses.replace(state, step=step, stitch_count=new_count), instruction


def _side_name(row: int, ctx: RenderContext) -> str:
    return "round" if ctx.in_rounds else side_for_row(row).value


def plain_rows(
    state: RenderState, ctx: RenderContext, through_row: int
) -> tuple[RenderState, list[DetailedInstruction]]:
    """
    Work every row after ``state.row`` up to *through_row* without shaping.

    A single row is rendered as itself (RS/WS by parity); longer stretches
    collapse into one "work even" range.
    """
    start = state.row + 1
    if through_row < start:
        return state, []
    pb = ctx.phrases
    count = state.stitch_count
    if through_row == start:
        state, instruction = emit(
            state,
            ctx,
            InstructionType.PLAIN_ROW,
            pb.plain(start, ctx.in_rounds),
            label=pb.row_label(start, ctx.in_rounds),
            position=start,
            count=count,
            side=_side_name(start, ctx),
        )
    else:
        rows = through_row - start + 1
        state, instruction = emit(
            state,
            ctx,
            InstructionType.PLAIN_ROW,
            pb.work_even(rows, ctx.in_rounds),
            label=pb.range_label(start, through_row, ctx.in_rounds),
            position=start,
            count=count,
            rows=rows,
            last_row=through_row,
        )
    return state.at_row(through_row), [instruction]


def bind_off_row(
    state: RenderState, ctx: RenderContext, row: int, stitches: int
) -> tuple[RenderState, DetailedInstruction]:
    """Bind off *stitches* at the start of *row* and work to the end."""
    pb = ctx.phrases
    count = _apply(state.stitch_count, -stitches)
    state, instruction = emit(
        state,
        ctx,
        InstructionType.BIND_OFF,
        pb.bind_off_at_start(row, stitches),
        label=pb.row_label(row, ctx.in_rounds),
        position=row,
        count=count,
        side=_side_name(row, ctx),
        stitch_delta=-stitches,
    )
    return state.at_row(row), instruction


# ── The fold step ──────────────────────────────────────────────────────────────


def _rows_per_occurrence(action: ShapingAction, ctx: RenderContext) -> int:
    # A flat bind-off at several edges is worked at the start of consecutive rows.
    if action.action_type == ActionType.BIND_OFF and not ctx.in_rounds:
        return ctx.edges
    return 1


def _occurrence(
    state: RenderState,
    action: ShapingAction,
    ctx: RenderContext,
    describe: Describer,
    start: int,
) -> tuple[RenderState, list[DetailedInstruction]]:
    pb = ctx.phrases
    if action.action_type == ActionType.BIND_OFF and not ctx.in_rounds:
        instructions = []
        for edge in range(ctx.edges):
            state, instruction = bind_off_row(state, ctx, start + edge, action.stitches)
            instructions.append(instruction)
        return state, instructions

    delta = action.sign * action.stitches * ctx.edges
    count = _apply(state.stitch_count, delta)
    body = pb.explained(describe(action, pb))
    state, instruction = emit(
        state,
        ctx,
        InstructionType.SHAPING_ROW,
        body,
        label=pb.row_label(start, ctx.in_rounds),
        position=start,
        count=count,
        side=_side_name(start, ctx),
        action_type=action.action_type.value,
        stitches_per_edge=action.stitches,
        edges=ctx.edges,
        stitch_delta=delta,
    )
    return state.at_row(start), [instruction]


def render_action(
    state: RenderState,
    action: ShapingAction,
    ctx: RenderContext,
    describe: Describer,
) -> tuple[RenderState, list[DetailedInstruction]]:
    """
    Render one action: the plain rows leading up to it, its first
    occurrence, and (if repeated) the rest of its block plus one repeat
    instruction carrying the count after every repeat.

    Raises
    ------
    ScheduleError
        If the action starts on a row already worked, its first row
        contradicts its side of fabric, a one-sided repeat has an odd
        cadence in flat work, or the count would go negative.
    """
    start = action.row_offset + ctx.row_shift
    if start <= state.row:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Action at row {start} overlaps rows already worked (through row {state.row})",
        )
    if (
        not ctx.in_rounds
        and action.side_of_fabric != FabricSide.BOTH
        and side_for_row(start) != action.side_of_fabric
    ):
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Action on row {start} is marked {action.side_of_fabric.value} but that row is "
            f"{side_for_row(start).value}",
        )
    if (
        not ctx.in_rounds
        and action.side_of_fabric != FabricSide.BOTH
        and action.has_repeat
        and (action.every_n_rows or 1) % 2 == 1
    ):
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Action marked {action.side_of_fabric.value} repeats every {action.every_n_rows} "
            f"rows, so every other occurrence falls on the opposite side",
        )
    occupied = _rows_per_occurrence(action, ctx)
    if action.has_repeat and (action.every_n_rows or 1) < occupied:
        raise ScheduleError(
            ErrorCode.INVALID_SCHEDULE,
            f"Action repeats every {action.every_n_rows} rows but one occurrence takes "
            f"{occupied} rows",
        )

    state, instructions = plain_rows(state, ctx, start - 1)
    state, worked = _occurrence(state, action, ctx, describe, start)
    instructions.extend(worked)
    if not action.has_repeat:
        return state, instructions

    block = action.every_n_rows or 1
    state, trailing = plain_rows(state, ctx, start + block - 1)
    instructions.extend(trailing)

    remaining = action.repeat_count - 1
    delta = action.sign * action.stitches * ctx.edges * remaining
    final = _apply(state.stitch_count, delta)
    state, instruction = emit(
        state,
        ctx,
        InstructionType.REPEAT,
        ctx.phrases.repeat(block, remaining, ctx.in_rounds),
        position=start + block,
        count=final,
        block_rows=block,
        repeats=remaining,
        last_row=action.block_last_row + ctx.row_shift,
        stitch_delta=delta,
    )
    instructions.append(instruction)
    return state.at_row(action.block_last_row + ctx.row_shift), instructions
