"""Armhole rendering: base bind-off over two rows, edge decreases, then work even."""

from __future__ import annotations

from knitshape.schemas.schedule import ArmholeKind, ArmholeSchedule

from .fold import RenderContext, RenderState, plain_rows, render_action, require_count
from .instructions import DetailedInstruction
from .templates import edge_decrease_both, raglan_edge_decrease


def render_armhole(
    schedule: ArmholeSchedule, ctx: RenderContext, warnings: list[str]
) -> list[DetailedInstruction]:
    panel = require_count(schedule.panel_stitches, "panel_stitches", minimum=1)
    total_rows = require_count(schedule.total_rows, "total_rows")
    describe = raglan_edge_decrease if schedule.kind == ArmholeKind.RAGLAN else edge_decrease_both

    ctx = ctx.replace(edges=schedule.edges)
    state = RenderState(stitch_count=panel)
    instructions: list[DetailedInstruction] = []
    for action in schedule.actions:
        state, out = render_action(state, action, ctx, describe)
        instructions.extend(out)
    state, out = plain_rows(state, ctx, total_rows)
    instructions.extend(out)

    if state.row > total_rows:
        warnings.append(
            f"Armhole shaping runs to row {state.row}, past the planned depth of {total_rows} rows"
        )
    return instructions
