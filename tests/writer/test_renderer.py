"""Tests for knitshape/writer/renderer.py: the render_instructions boundary."""

import logging
import re

import pytest

from knitshape.calculators.armhole import calculate_armhole_shaping
from knitshape.calculators.neckline import calculate_neckline_shaping
from knitshape.schemas.inputs import ArmholeInput, NecklineInput
from knitshape.schemas.results import ErrorCode, ShapingError
from knitshape.schemas.schedule import ArmholeKind, NecklineKind
from knitshape.terminology import CraftType, Language
from knitshape.utilities.types import Gauge
from knitshape.writer.config import RenderConfig, Verbosity
from knitshape.writer.renderer import (
    InstructionWriter,
    TemplateInstructionWriter,
    render_instructions,
)

_GAUGE = Gauge.per_10cm(20, 28)
_COUNT_CLAUSE = re.compile(r"\(\d+ (sts|m)\b")


@pytest.fixture
def armhole():
    return calculate_armhole_shaping(
        ArmholeInput(
            component_key="back",
            gauge=_GAUGE,
            kind=ArmholeKind.RAGLAN,
            depth_cm=25.0,
            width_cm=15.0,
            panel_width_stitches=100,
            shoulder_width_cm=10.0,
        )
    ).unwrap()


@pytest.fixture
def neckline():
    return calculate_neckline_shaping(
        NecklineInput(
            component_key="front",
            gauge=_GAUGE,
            kind=NecklineKind.V_NECK,
            depth_cm=8.0,
            width_cm=20.0,
            panel_width_stitches=100,
            shoulder_width_cm=10.0,
        )
    ).unwrap()


class TestBoundaryErrors:
    def test_missing_schedule(self):
        result = render_instructions(None, "knitting", "en")
        assert not result.success
        assert result.error.code == ErrorCode.MISSING_CALCULATIONS
        assert result.instructions == ()

    def test_unknown_craft(self, armhole):
        result = render_instructions(armhole, "weaving", "en")
        assert result.error.code == ErrorCode.UNSUPPORTED_COMBINATION

    def test_unknown_language(self, armhole):
        result = render_instructions(armhole, CraftType.KNITTING, "de")
        assert result.error.code == ErrorCode.UNSUPPORTED_COMBINATION

    def test_unknown_schedule_type(self):
        result = render_instructions(object(), "knitting", "en")
        assert result.error.code == ErrorCode.UNSUPPORTED_COMBINATION
        assert result.error.field == "schedule"

    def test_bad_config_mapping(self, armhole):
        result = render_instructions(armhole, "knitting", "en", config={"colour": "red"})
        assert result.error.code == ErrorCode.INVALID_INPUT
        assert result.error.field == "config"

    def test_failure_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="knitshape.writer.renderer"):
            render_instructions(None, "knitting", "en")
        assert "Rendering failed [missing_calculations]" in caplog.text

    def test_unwrap_raises(self):
        with pytest.raises(ShapingError):
            render_instructions(None, "knitting", "en").unwrap()


class TestLanguageParity:
    def test_same_structure_in_every_language(self, armhole, neckline):
        for schedule in (armhole, neckline):
            en = render_instructions(schedule, CraftType.KNITTING, Language.EN)
            fr = render_instructions(schedule, CraftType.KNITTING, Language.FR)
            assert len(en.instructions) == len(fr.instructions)
            for a, b in zip(en.instructions, fr.instructions):
                assert (a.step, a.position, a.instruction_type, a.stitch_count_after) == (
                    b.step,
                    b.position,
                    b.instruction_type,
                    b.stitch_count_after,
                )
                assert dict(a.metadata) == dict(b.metadata)
                assert a.text != b.text

    def test_same_structure_in_every_craft(self, armhole):
        knit = render_instructions(armhole, "knitting", "en")
        crochet = render_instructions(armhole, "crochet", "en")
        assert [i.stitch_count_after for i in knit.instructions] == [
            i.stitch_count_after for i in crochet.instructions
        ]
        assert "sc3tog" in crochet.texts[2]


class TestConfigEffects:
    def test_counts_off(self, armhole, neckline):
        for schedule in (armhole, neckline):
            for language in Language:
                result = render_instructions(
                    schedule, "knitting", language, RenderConfig(include_stitch_counts=False)
                )
                assert result.success
                assert not any(_COUNT_CLAUSE.search(t) for t in result.texts)
                assert all(i.stitch_count_after is None for i in result.instructions)

    def test_row_numbers_off(self, armhole):
        result = render_instructions(
            armhole, "knitting", "en", config={"include_row_numbers": False}
        )
        assert result.texts[0].startswith("Next row (RS): Bind off 3 sts")
        assert result.texts[3] == "Next 3 rows: Work even for 3 rows. (90 sts)"
        assert result.instructions[0].row_number == 1

    def test_generic_techniques(self, armhole):
        result = render_instructions(
            armhole, "knitting", "en", config={"use_specific_techniques": False}
        )
        assert result.texts[2] == (
            "Row 3 (RS): K2, decrease 2 sts, knit to last 5 sts, decrease 2 sts, k2. (90 sts)"
        )

    def test_detailed_explains_once_per_row(self, armhole):
        result = render_instructions(
            armhole, "knitting", "en", config={"verbosity": Verbosity.DETAILED}
        )
        row3 = result.texts[2]
        assert "sssk: slip 3 sts knitwise" in row3
        assert "k3tog: knit 3 sts together." in row3
        assert "sssk: slip" not in result.texts[3]

    def test_minimal_drops_notes(self, neckline):
        result = render_instructions(neckline, "knitting", "en", config={"verbosity": "minimal"})
        assert "holder" not in result.texts[0]

    def test_warnings_are_strings(self, neckline):
        result = render_instructions(neckline, "knitting", "en")
        assert all(isinstance(w, str) for w in result.warnings)


class TestWriterProtocol:
    def test_template_writer_satisfies_protocol(self):
        assert isinstance(TemplateInstructionWriter(), InstructionWriter)

    def test_template_writer_matches_renderer(self, armhole):
        written = TemplateInstructionWriter().write(armhole, "knitting", "fr")
        assert written == render_instructions(armhole, "knitting", "fr")
