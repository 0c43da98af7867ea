"""Tests for knitshape/calculators/armhole.py."""

import dataclasses

import pytest

from knitshape.calculators.armhole import (
    adjusted_armhole_ratios,
    armhole_shaping_start_row,
    calculate_armhole_shaping,
    check_armhole_fit,
    estimate_armhole_dimensions,
    raglan_decrease_frequency,
    summarize_armhole_schedule,
)
from knitshape.schemas.inputs import ArmholeInput, ArmholeRatios
from knitshape.schemas.results import ErrorCode
from knitshape.schemas.schedule import ActionType, ArmholeKind, FabricSide
from knitshape.utilities.types import Gauge

_GAUGE = Gauge.per_10cm(20, 28)


def _input(**overrides):
    values = dict(
        component_key="back",
        gauge=_GAUGE,
        kind=ArmholeKind.RAGLAN,
        depth_cm=25.0,
        width_cm=15.0,
        panel_width_stitches=100,
        shoulder_width_cm=10.0,
    )
    values.update(overrides)
    return ArmholeInput(**values)


class TestRaglanArmhole:
    def test_reference_scenario(self):
        """
        15 cm = 30 sts; base = clamp(round(3.0), 3, 6) = 3; 27 sts to
        decrease in ceil(27/2) = 14 events; 25 cm = 70 rows;
        frequency = clamp(70 // 14, 2, 4) = 4.
        """
        result = calculate_armhole_shaping(_input())
        assert result.success
        schedule = result.schedule
        assert schedule.base_bind_off_stitches == 3
        assert schedule.total_rows == 70
        assert result.metadata.derived["decrease_frequency"] == 4

    def test_actions(self):
        """Base bind-off, 13 x 2 sts every 4 rows from row 3, then 1 st on row 55."""
        base, main, last = calculate_armhole_shaping(_input()).schedule.actions
        assert base.action_type == ActionType.BIND_OFF
        assert base.side_of_fabric == FabricSide.BOTH
        assert (main.row_offset, main.stitches, main.repeats, main.every_n_rows) == (3, 2, 13, 4)
        assert main.block_last_row == 54
        assert (last.row_offset, last.stitches, last.repeats) == (55, 1, None)

    def test_removes_full_width_each_edge(self):
        schedule = calculate_armhole_shaping(_input()).schedule
        assert schedule.stitches_removed_each_edge == 30
        assert schedule.final_panel_stitches == 40

    def test_raglan_line_length_sets_rows(self):
        """30 cm raglan line = 84 rows."""
        schedule = calculate_armhole_shaping(_input(raglan_line_length_cm=30.0)).schedule
        assert schedule.total_rows == 84

    def test_short_raglan_line_warns(self):
        result = calculate_armhole_shaping(_input(raglan_line_length_cm=20.0))
        assert result.success
        assert any(w.code == "SHORT_RAGLAN_LINE" for w in result.warnings)

    def test_frequency_clamp(self):
        assert raglan_decrease_frequency(70, 14) == 4
        assert raglan_decrease_frequency(20, 14) == 2
        assert raglan_decrease_frequency(70, 0) == 2

    def test_frequency_kept_even(self):
        """45 // 14 = 3 rounds down to 2 so each decrease stays on a RS row."""
        assert raglan_decrease_frequency(45, 14) == 2

    def test_odd_custom_intervals_kept_even(self):
        ratios = ArmholeRatios(rapid_interval=3, gradual_interval=5)
        result = calculate_armhole_shaping(
            _input(kind=ArmholeKind.ROUNDED_SET_IN, depth_cm=20.0, width_cm=6.0, ratios=ratios)
        )
        decreases = [a for a in result.schedule.actions if a.action_type == ActionType.DECREASE]
        assert all(a.every_n_rows % 2 == 0 for a in decreases if a.has_repeat)
        assert all(a.row_offset % 2 == 1 for a in decreases)


class TestRoundedSetIn:
    def test_split(self):
        """
        20 cm deep, 15 cm wide: 30 sts; base = round(30/4) = 8;
        per edge (30 - 8) // 2 = 11; rapid round(5.5) = 6 -> 3 events of 2;
        gradual 11 - 6 = 5 events of 1.
        """
        schedule = calculate_armhole_shaping(
            _input(kind=ArmholeKind.ROUNDED_SET_IN, depth_cm=20.0)
        ).schedule
        base, rapid, gradual = schedule.actions
        assert base.stitches == 8
        assert (rapid.row_offset, rapid.stitches, rapid.repeats, rapid.every_n_rows) == (3, 2, 3, 2)
        assert rapid.block_last_row == 8
        assert (gradual.row_offset, gradual.stitches, gradual.repeats, gradual.every_n_rows) == (
            9,
            1,
            5,
            4,
        )
        assert schedule.total_rows == 56
        assert schedule.final_panel_stitches == 100 - 2 * 19


class TestArmholeValidation:
    def test_zero_width_fails(self):
        result = calculate_armhole_shaping(_input(width_cm=0))
        assert not result.success
        assert result.error.code == ErrorCode.INVALID_DIMENSION

    def test_wide_for_panel_warns(self):
        """30 sts >= 40% of a 70-st panel."""
        result = calculate_armhole_shaping(_input(panel_width_stitches=70, shoulder_width_cm=5))
        assert result.success
        assert any(w.code == "ARMHOLE_WIDE_FOR_PANEL" for w in result.warnings)

    def test_consuming_panel_fails(self):
        """Two edges of 30 sts leave nothing of a 50-st panel."""
        result = calculate_armhole_shaping(_input(panel_width_stitches=50, shoulder_width_cm=5))
        assert not result.success
        assert result.error.messages[-1].code == "ARMHOLE_CONSUMES_PANEL"

    def test_deep_and_wide_warn(self):
        result = calculate_armhole_shaping(
            _input(depth_cm=36, width_cm=26, panel_width_stitches=200)
        )
        codes = {w.code for w in result.warnings}
        assert {"DEEP_ARMHOLE", "WIDE_ARMHOLE"} <= codes


class TestArmholeHelpers:
    def test_adjusted_ratios(self):
        deep = adjusted_armhole_ratios(ArmholeKind.ROUNDED_SET_IN, 26, 12)
        assert (deep.rapid_interval, deep.gradual_interval, deep.rapid_ratio) == (4, 6, 0.4)
        narrow = adjusted_armhole_ratios(ArmholeKind.ROUNDED_SET_IN, 20, 8)
        assert narrow.base_ratio == 1 / 6
        assert adjusted_armhole_ratios(ArmholeKind.RAGLAN, 30, 20).base_ratio == 1 / 4

    def test_estimate_dimensions(self):
        depth, width = estimate_armhole_dimensions(100, ArmholeKind.RAGLAN)
        assert depth == pytest.approx(25.0)
        assert width == pytest.approx(15.0)

    def test_start_row(self):
        assert armhole_shaping_start_row(150, 70) == 78

    def test_fit_check(self):
        schedule = calculate_armhole_shaping(_input()).schedule
        narrow = dataclasses.replace(schedule, panel_stitches=70)
        codes = [m.code for m in check_armhole_fit(narrow, panel_rows=100)]
        assert codes == ["ARMHOLE_TOO_WIDE_FOR_PANEL", "ARMHOLE_TOO_TALL_FOR_PANEL"]

    def test_summary(self):
        summary = summarize_armhole_schedule(calculate_armhole_shaping(_input()).schedule)
        assert summary.startswith("raglan armhole: bind off 3 sts")
        assert summary.endswith("40 sts remain")


class TestRepeatability:
    def test_same_input_same_result(self):
        """Two calls on one input agree on everything but the timestamp."""
        first = calculate_armhole_shaping(_input())
        second = calculate_armhole_shaping(_input())
        assert first.success
        assert first.schedule == second.schedule
        assert first == second
