"""Tests for knitshape/writer/fold.py."""

import pytest

from knitshape.schemas.results import ErrorCode
from knitshape.schemas.schedule import ActionType, FabricSide, ShapingAction
from knitshape.terminology import CraftType, Language
from knitshape.writer.config import RenderConfig
from knitshape.writer.fold import (
    RenderContext,
    RenderState,
    ScheduleError,
    bind_off_row,
    emit,
    plain_rows,
    render_action,
    require_count,
)
from knitshape.writer.instructions import InstructionType
from knitshape.writer.templates import Phrasebook, edge_decrease_both, neck_decrease_at_start


def _ctx(**changes):
    config = changes.pop("config", RenderConfig())
    pb = Phrasebook(CraftType.KNITTING, Language.EN, config)
    return RenderContext(phrases=pb, **changes)


def _dec(row=3, repeats=None, every=None, stitches=1, side=FabricSide.RIGHT_SIDE):
    return ShapingAction(ActionType.DECREASE, stitches, row, side, repeats, every)


class TestPlainRows:
    def test_single_row(self):
        state, out = plain_rows(RenderState(stitch_count=40), _ctx(), 1)
        assert [i.text for i in out] == ["Row 1 (RS): Knit across. (40 sts)"]
        assert out[0].metadata["side"] == "RS"
        assert state.row == 1

    def test_range_collapses(self):
        state, out = plain_rows(RenderState(row=2, stitch_count=40), _ctx(), 6)
        (instruction,) = out
        assert instruction.text == "Rows 3-6: Work even for 4 rows. (40 sts)"
        assert instruction.row_number == 3
        assert instruction.metadata["last_row"] == 6
        assert state.row == 6

    def test_nothing_to_work(self):
        state = RenderState(row=5, stitch_count=40)
        assert plain_rows(state, _ctx(), 5) == (state, [])

    def test_rounds(self):
        _, out = plain_rows(RenderState(stitch_count=76), _ctx(in_rounds=True), 1)
        assert out[0].round_number == 1
        assert out[0].row_number is None
        assert out[0].text == "Round 1: Knit around. (76 sts)"


class TestRenderAction:
    def test_single_occurrence(self):
        """Rows 1-2 plain, then the shaping row."""
        state, out = render_action(
            RenderState(stitch_count=40), _dec(), _ctx(), neck_decrease_at_start
        )
        assert [i.text for i in out] == [
            "Rows 1-2: Work even for 2 rows. (40 sts)",
            "Row 3 (RS): K1, ssk, knit to end. (39 sts)",
        ]
        assert (state.step, state.row, state.stitch_count) == (2, 3, 39)
        assert out[1].metadata["stitch_delta"] == -1

    def test_repeat_block(self):
        """
        4 decreases every 2 rows from row 3: rows 3-4 are worked out, then
        repeated 3 more times through row 10.
        """
        state, out = render_action(
            RenderState(row=2, stitch_count=40),
            _dec(repeats=4, every=2),
            _ctx(),
            neck_decrease_at_start,
        )
        assert [i.instruction_type for i in out] == [
            InstructionType.SHAPING_ROW,
            InstructionType.PLAIN_ROW,
            InstructionType.REPEAT,
        ]
        assert out[1].text == "Row 4 (WS): Purl across. (39 sts)"
        repeat = out[2]
        assert repeat.text == "Repeat the last 2 rows 3 more times. (36 sts)"
        assert repeat.row_number == 5
        assert repeat.metadata["last_row"] == 10
        assert repeat.metadata["repeats"] == 3
        assert (state.row, state.stitch_count) == (10, 36)

    def test_edges_multiply_delta(self):
        state, out = render_action(
            RenderState(stitch_count=40), _dec(row=1), _ctx(edges=2), edge_decrease_both
        )
        assert state.stitch_count == 38
        assert out[0].metadata["edges"] == 2

    def test_bind_off_on_consecutive_rows(self):
        action = ShapingAction(ActionType.BIND_OFF, 3, 1, FabricSide.BOTH)
        state, out = render_action(
            RenderState(stitch_count=40), action, _ctx(edges=2), edge_decrease_both
        )
        assert [i.row_number for i in out] == [1, 2]
        assert [i.stitch_count_after for i in out] == [37, 34]
        assert out[1].text.startswith("Row 2 (WS): Bind off 3 sts")
        assert state.row == 2

    def test_row_shift(self):
        state, out = render_action(
            RenderState(row=10, stitch_count=40),
            _dec(row=1),
            _ctx(row_shift=10),
            neck_decrease_at_start,
        )
        assert out[0].row_number == 11
        assert state.row == 11

    def test_section_metadata(self):
        _, out = render_action(
            RenderState(stitch_count=40), _dec(row=1), _ctx(section="left"), neck_decrease_at_start
        )
        assert out[0].metadata["section"] == "left"

    def test_overlap_rejected(self):
        with pytest.raises(ScheduleError) as exc_info:
            render_action(
                RenderState(row=5, stitch_count=40), _dec(), _ctx(), neck_decrease_at_start
            )
        assert exc_info.value.code == ErrorCode.INVALID_SCHEDULE
        assert "overlaps" in exc_info.value.message

    def test_wrong_side_rejected(self):
        with pytest.raises(ScheduleError, match="marked RS but that row is WS"):
            render_action(
                RenderState(stitch_count=40), _dec(row=2), _ctx(), neck_decrease_at_start
            )

    def test_odd_cadence_rejected_when_flat(self):
        with pytest.raises(ScheduleError, match="repeats every 3 rows") as exc_info:
            render_action(
                RenderState(stitch_count=40),
                _dec(row=1, repeats=3, every=3),
                _ctx(),
                neck_decrease_at_start,
            )
        assert exc_info.value.code == ErrorCode.INVALID_SCHEDULE

    def test_odd_cadence_allowed_in_rounds(self):
        """Rounds have no wrong side: decreases on rounds 1, 4, 7 are fine."""
        state, out = render_action(
            RenderState(stitch_count=40),
            _dec(row=1, repeats=3, every=3),
            _ctx(in_rounds=True),
            neck_decrease_at_start,
        )
        assert state.stitch_count == 37
        assert out[-1].metadata["last_row"] == 9

    def test_odd_cadence_allowed_for_both_sides(self):
        action = _dec(row=1, repeats=3, every=3, side=FabricSide.BOTH)
        state, _ = render_action(
            RenderState(stitch_count=40), action, _ctx(), neck_decrease_at_start
        )
        assert state.stitch_count == 37

    def test_side_ignored_in_rounds(self):
        _, out = render_action(
            RenderState(stitch_count=40), _dec(row=2), _ctx(in_rounds=True), neck_decrease_at_start
        )
        assert out[-1].round_number == 2

    def test_negative_count_rejected(self):
        with pytest.raises(ScheduleError, match="below zero"):
            render_action(
                RenderState(stitch_count=1), _dec(row=1, stitches=2), _ctx(), neck_decrease_at_start
            )

    def test_repeated_bind_off_needs_room(self):
        action = ShapingAction(ActionType.BIND_OFF, 2, 1, FabricSide.BOTH, repeats=3, every_n_rows=1)
        with pytest.raises(ScheduleError, match="one occurrence takes 2 rows"):
            render_action(RenderState(stitch_count=40), action, _ctx(edges=2), edge_decrease_both)


class TestCounts:
    def test_counts_hidden_but_tracked(self):
        ctx = _ctx(config=RenderConfig(include_stitch_counts=False))
        state, out = render_action(RenderState(stitch_count=40), _dec(), ctx, neck_decrease_at_start)
        assert all("(" not in i.text.split(":", 1)[1] for i in out)
        assert all(i.stitch_count_after is None for i in out)
        assert state.stitch_count == 39

    def test_emit_without_count_keeps_state(self):
        state, instruction = emit(
            RenderState(step=4, stitch_count=12), _ctx(), InstructionType.SETUP_ROW, "Note."
        )
        assert instruction.step == 5
        assert instruction.text == "Note."
        assert instruction.stitch_count_after is None
        assert state.stitch_count == 12

    def test_bind_off_row(self):
        state, instruction = bind_off_row(RenderState(stitch_count=20), _ctx(), 1, 5)
        assert instruction.instruction_type == InstructionType.BIND_OFF
        assert instruction.stitch_count_after == 15
        assert instruction.metadata["stitch_delta"] == -5
        assert state.row == 1


class TestRequireCount:
    def test_valid(self):
        assert require_count(3, "x") == 3

    def test_missing(self):
        with pytest.raises(ScheduleError) as exc_info:
            require_count(None, "panel_stitches")
        assert exc_info.value.code == ErrorCode.MISSING_CALCULATIONS
        assert exc_info.value.field == "panel_stitches"

    @pytest.mark.parametrize("value", [-1, True, 2.5])
    def test_invalid(self, value):
        with pytest.raises(ScheduleError) as exc_info:
            require_count(value, "x")
        assert exc_info.value.code == ErrorCode.INVALID_SCHEDULE

    def test_minimum(self):
        with pytest.raises(ScheduleError, match=">= 1"):
            require_count(0, "x", minimum=1)
