"""Tests for knitshape/writer/shawl.py, through render_instructions."""

import dataclasses

from knitshape.calculators.shawl import calculate_shawl_shaping
from knitshape.schemas.inputs import ShawlInput
from knitshape.schemas.results import ErrorCode
from knitshape.schemas.schedule import (
    ActionType,
    ShawlMethod,
    ShawlPhase,
    ShawlSchedule,
    WorkStyle,
)
from knitshape.utilities.types import Gauge
from knitshape.writer.instructions import InstructionType
from knitshape.writer.renderer import render_instructions


def _schedule(method, **overrides):
    values = dict(
        component_key="shawl",
        gauge=Gauge.per_10cm(20, 28),
        method=method,
        target_wingspan_cm=80.0,
        target_depth_cm=40.0,
    )
    values.update(overrides)
    return calculate_shawl_shaping(ShawlInput(**values)).unwrap()


class TestCenterOut:
    def test_full_render(self):
        """3 sts, +4 every other row 56 times = 227; bind off on row 113."""
        result = render_instructions(_schedule(ShawlMethod.TOP_DOWN_CENTER_OUT), "knitting", "en")
        assert result.success
        assert result.texts == [
            "Using the long-tail method, cast on 3 sts. (3 sts)",
            "Row 1 (RS): K1, M1L, knit to center st, M1L, k1, M1R, knit to last st, M1R, k1. "
            "(7 sts)",
            "Row 2 (WS): Purl across. (7 sts)",
            "Repeat the last 2 rows 55 more times. (227 sts)",
            "Row 113 (RS): Bind off all 227 sts.",
        ]
        assert result.instructions[-1].stitch_count_after == 0

    def test_phase_section(self):
        result = render_instructions(_schedule(ShawlMethod.TOP_DOWN_CENTER_OUT), "knitting", "en")
        assert result.instructions[1].metadata["section"] == "increase"

    def test_border_note_and_counts(self):
        """3 border sts each side: cast on 9, finish at 227 + 6 = 233."""
        result = render_instructions(
            _schedule(ShawlMethod.TOP_DOWN_CENTER_OUT, border_stitches_each_side=3),
            "knitting",
            "en",
        )
        assert result.texts[0] == (
            "Using the long-tail method, cast on 9 sts. Work the first and last 3 sts of every "
            "row in garter stitch. (9 sts)"
        )
        assert result.instructions[-2].stitch_count_after == 233

    def test_border_note_hidden_at_minimal(self):
        result = render_instructions(
            _schedule(ShawlMethod.TOP_DOWN_CENTER_OUT, border_stitches_each_side=3),
            "knitting",
            "en",
            config={"verbosity": "minimal"},
        )
        assert result.texts[0] == "Using the long-tail method, cast on 9 sts. (9 sts)"

    def test_in_the_round(self):
        result = render_instructions(
            _schedule(ShawlMethod.TOP_DOWN_CENTER_OUT, work_style=WorkStyle.IN_THE_ROUND),
            "knitting",
            "en",
        )
        texts = result.texts
        assert texts[0].startswith("Using the long-tail method, cast on 3 sts and join in the round.")
        assert texts[1].startswith("Round 1: ")
        assert texts[-1] == "Round 113: Bind off all 227 sts."


class TestSideToSide:
    def test_two_phases(self):
        """
        Up 1 st every other row to 80 over rows 1-152, then back down to 4
        over rows 153-304; bind off on row 305.
        """
        result = render_instructions(
            _schedule(ShawlMethod.SIDE_TO_SIDE, target_wingspan_cm=110.0), "knitting", "en"
        )
        texts = result.texts
        assert texts[1] == "Row 1 (RS): K1, M1L, knit to end. (5 sts)"
        assert texts[3] == "Repeat the last 2 rows 75 more times. (80 sts)"
        assert texts[4] == "Row 153 (RS): K1, ssk, knit to end. (79 sts)"
        assert texts[6] == "Repeat the last 2 rows 75 more times. (4 sts)"
        assert texts[7] == "Row 305 (RS): Bind off all 4 sts."
        sections = [i.metadata.get("section") for i in result.instructions[1:7]]
        assert sections == ["increase"] * 3 + ["decrease"] * 3


class TestBottomUp:
    def test_decreases_both_edges(self):
        """301 sts, 1 st off each edge every other row 149 times, down to 3."""
        result = render_instructions(
            _schedule(ShawlMethod.BOTTOM_UP, target_wingspan_cm=150.0, target_depth_cm=106.0),
            "knitting",
            "en",
        )
        texts = result.texts
        assert texts[0] == "Using the long-tail method, cast on 301 sts. (301 sts)"
        assert texts[1] == "Row 1 (RS): K1, ssk, knit to last 3 sts, k2tog, k1. (299 sts)"
        assert texts[3] == "Repeat the last 2 rows 148 more times. (3 sts)"
        assert texts[4] == "Row 299 (RS): Bind off all 3 sts."
        assert result.instructions[1].metadata["edges"] == 2

    def test_crochet_french(self):
        result = render_instructions(
            _schedule(ShawlMethod.BOTTOM_UP, target_wingspan_cm=150.0, target_depth_cm=106.0),
            "crochet",
            "fr",
        )
        texts = result.texts
        assert texts[0] == "Faire 301 mailles en l'air. (301 m)"
        assert texts[1] == (
            "Rang 1 (Endroit) : 1 ml, 2 ms ens, ms jusqu'aux 2 dernières m, 2 ms ens. (299 m)"
        )
        assert texts[-1] == "Rang 299 (Endroit) : Arrêter le travail sur les 3 m."


class TestShawlErrors:
    def test_unsupported_increase(self):
        phase = ShawlPhase(
            name="increase",
            action_type=ActionType.INCREASE,
            description="Increase 3 sts",
            total_shaping_rows=2,
            stitches_per_event=3,
            total_rows_in_phase=4,
            shaping_frequency=2,
        )
        schedule = ShawlSchedule(
            method=ShawlMethod.TOP_DOWN_CENTER_OUT,
            work_style=WorkStyle.FLAT,
            cast_on_stitches=3,
            phases=(phase,),
            final_stitch_count=9,
        )
        result = render_instructions(schedule, "knitting", "en")
        assert not result.success
        assert result.error.code == ErrorCode.UNSUPPORTED_COMBINATION
        assert result.error.field == "phases"

    def test_final_count_checked(self):
        schedule = _schedule(ShawlMethod.TOP_DOWN_CENTER_OUT)
        object.__setattr__(schedule, "final_stitch_count", 230)
        result = render_instructions(schedule, "knitting", "en")
        assert result.error.code == ErrorCode.INVALID_SCHEDULE
        assert result.error.field == "final_stitch_count"

    def test_phase_overrun_warns(self):
        schedule = _schedule(ShawlMethod.TOP_DOWN_CENTER_OUT)
        (phase,) = schedule.phases
        short = dataclasses.replace(phase, total_rows_in_phase=100)
        object.__setattr__(schedule, "phases", (short,))
        result = render_instructions(schedule, "knitting", "en")
        assert result.success
        assert any("past the phase end at row 100" in w for w in result.warnings)

    def test_negative_border(self):
        schedule = _schedule(ShawlMethod.TOP_DOWN_CENTER_OUT)
        object.__setattr__(schedule, "border_stitches_each_side", -1)
        result = render_instructions(schedule, "knitting", "en")
        assert result.error.code == ErrorCode.INVALID_SCHEDULE

    def test_plain_cast_on_only(self):
        """A side-to-side point with no shaping is cast on and bound off."""
        result = render_instructions(
            _schedule(ShawlMethod.SIDE_TO_SIDE, target_depth_cm=1.5, target_wingspan_cm=10.0),
            "knitting",
            "en",
        )
        assert [i.instruction_type for i in result.instructions] == [
            InstructionType.CAST_ON,
            InstructionType.BIND_OFF,
        ]
        assert result.texts[-1] == "Row 1 (RS): Bind off all 4 sts."
