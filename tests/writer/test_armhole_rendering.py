"""Tests for knitshape/writer/armhole.py, through render_instructions."""

import dataclasses

from knitshape.calculators.armhole import calculate_armhole_shaping
from knitshape.schemas.inputs import ArmholeInput
from knitshape.schemas.results import ErrorCode
from knitshape.schemas.schedule import ActionType, ArmholeKind, FabricSide, ShapingAction
from knitshape.utilities.types import Gauge
from knitshape.writer.instructions import InstructionType
from knitshape.writer.renderer import render_instructions


def _schedule(kind=ArmholeKind.RAGLAN, depth_cm=25.0):
    return calculate_armhole_shaping(
        ArmholeInput(
            component_key="back",
            gauge=Gauge.per_10cm(20, 28),
            kind=kind,
            depth_cm=depth_cm,
            width_cm=15.0,
            panel_width_stitches=100,
            shoulder_width_cm=10.0,
        )
    ).unwrap()


class TestRaglanArmhole:
    def test_full_render(self):
        """
        Bind off 3 at each edge (97, 94); 2 sts each edge every 4 rows, 13
        times (90 after the first, 42 after the repeat); 1 st each edge on
        row 55 (40); work even to row 70.
        """
        result = render_instructions(_schedule(), "knitting", "en")
        assert result.success
        assert result.texts == [
            "Row 1 (RS): Bind off 3 sts at the beginning of the row, knit to end. (97 sts)",
            "Row 2 (WS): Bind off 3 sts at the beginning of the row, purl to end. (94 sts)",
            "Row 3 (RS): K2, sssk, knit to last 5 sts, k3tog, k2. (90 sts)",
            "Rows 4-6: Work even for 3 rows. (90 sts)",
            "Repeat the last 4 rows 12 more times. (42 sts)",
            "Row 55 (RS): K2, ssk, knit to last 4 sts, k2tog, k2. (40 sts)",
            "Rows 56-70: Work even for 15 rows. (40 sts)",
        ]
        assert result.warnings == ()

    def test_final_count_matches_schedule(self):
        schedule = _schedule()
        result = render_instructions(schedule, "knitting", "en")
        assert result.instructions[-1].stitch_count_after == schedule.final_panel_stitches

    def test_shaping_metadata(self):
        result = render_instructions(_schedule(), "knitting", "en")
        shaping = result.instructions[2]
        assert shaping.instruction_type == InstructionType.SHAPING_ROW
        assert dict(shaping.metadata) == {
            "side": "RS",
            "action_type": "decrease",
            "stitches_per_edge": 2,
            "edges": 2,
            "stitch_delta": -4,
        }


class TestRoundedArmhole:
    def test_full_render(self):
        """Base 8 (92, 84); 3 x 2 every 2 (80 then 72); 5 x 1 every 4 (70 then 62)."""
        result = render_instructions(
            _schedule(ArmholeKind.ROUNDED_SET_IN, depth_cm=20.0), "knitting", "en"
        )
        counts = [i.stitch_count_after for i in result.instructions]
        assert counts == [92, 84, 80, 80, 72, 70, 70, 62, 62]
        assert result.texts[2] == "Row 3 (RS): K1, sssk, knit to last 4 sts, k3tog, k1. (80 sts)"
        assert result.texts[-1] == "Rows 29-56: Work even for 28 rows. (62 sts)"

    def test_french(self):
        result = render_instructions(
            _schedule(ArmholeKind.ROUNDED_SET_IN, depth_cm=20.0), "knitting", "fr"
        )
        assert result.texts[0] == (
            "Rang 1 (Endroit) : Rabattre 8 m au début du rang, tricoter à l'endroit "
            "jusqu'à la fin. (92 m)"
        )


class TestArmholeErrors:
    def test_shaping_past_depth_warns(self):
        schedule = dataclasses.replace(_schedule(), total_rows=50)
        result = render_instructions(schedule, "knitting", "en")
        assert result.success
        assert any("past the planned depth of 50 rows" in w for w in result.warnings)

    def test_decreases_exhaust_panel(self):
        schedule = dataclasses.replace(_schedule(), panel_stitches=20)
        result = render_instructions(schedule, "knitting", "en")
        assert not result.success
        assert result.error.code == ErrorCode.INVALID_SCHEDULE

    def test_wrong_side_action(self):
        actions = (ShapingAction(ActionType.DECREASE, 1, 2, FabricSide.RIGHT_SIDE),)
        schedule = dataclasses.replace(_schedule(), actions=actions)
        result = render_instructions(schedule, "knitting", "en")
        assert result.error.code == ErrorCode.INVALID_SCHEDULE

    def test_negative_rows(self):
        schedule = dataclasses.replace(_schedule(), total_rows=-1)
        result = render_instructions(schedule, "knitting", "en")
        assert result.error.code == ErrorCode.INVALID_SCHEDULE
        assert result.error.field == "total_rows"
