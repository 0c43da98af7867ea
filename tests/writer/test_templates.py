"""Tests for knitshape/writer/templates.py."""

from knitshape.schemas.schedule import ActionType, FabricSide, ShapingAction
from knitshape.terminology import CraftType, Language, TermKey
from knitshape.writer.config import IncreaseMethod, RenderConfig, Verbosity
from knitshape.writer.templates import (
    Lean,
    Phrase,
    Phrasebook,
    center_spine_increase,
    edge_decrease_both,
    neck_decrease_at_end,
    raglan_increase_round,
    side_for_row,
)

_DEC_1 = ShapingAction(ActionType.DECREASE, 1, 1, FabricSide.RIGHT_SIDE)
_INC_1 = ShapingAction(ActionType.INCREASE, 1, 1, FabricSide.RIGHT_SIDE)


def _pb(craft=CraftType.KNITTING, language=Language.EN, **config):
    return Phrasebook(craft, language, RenderConfig(**config))


class TestLabels:
    def test_row_label_carries_side(self):
        pb = _pb()
        assert pb.row_label(3) == "Row 3 (RS)"
        assert pb.row_label(4) == "Row 4 (WS)"

    def test_round_label_has_no_side(self):
        assert _pb().row_label(3, in_rounds=True) == "Round 3"

    def test_french_labels(self):
        pb = _pb(language=Language.FR)
        assert pb.row_label(3) == "Rang 3 (Endroit)"
        assert pb.range_label(1, 4) == "Rangs 1 à 4"

    def test_row_numbers_off(self):
        pb = _pb(include_row_numbers=False)
        assert pb.row_label(3) == "Next row (RS)"
        assert pb.range_label(1, 4) == "Next 4 rows"
        assert pb.range_label(1, 4, in_rounds=True) == "Next 4 rounds"

    def test_side_for_row(self):
        assert side_for_row(1) == FabricSide.RIGHT_SIDE
        assert side_for_row(2) == FabricSide.WRONG_SIDE


class TestSentences:
    def test_repeat_singular_and_plural(self):
        pb = _pb()
        assert pb.repeat(1, 1) == "Repeat the last row 1 more time."
        assert pb.repeat(4, 3) == "Repeat the last 4 rows 3 more times."
        assert pb.repeat(2, 5, in_rounds=True) == "Repeat the last 2 rounds 5 more times."

    def test_repeat_french(self):
        assert _pb(language=Language.FR).repeat(2, 1) == "Répéter les 2 derniers rangs encore 1 fois."

    def test_cast_on_method(self):
        assert _pb().cast_on(60) == "Using the long-tail method, cast on 60 sts."
        assert _pb(cast_on_method="cable").cast_on(60) == "Using the cable method, cast on 60 sts."
        assert _pb(craft=CraftType.CROCHET).cast_on(60) == "Chain 60."

    def test_plain_by_parity(self):
        pb = _pb()
        assert pb.plain(1) == "Knit across."
        assert pb.plain(2) == "Purl across."
        assert pb.plain(2, in_rounds=True) == "Knit around."

    def test_bind_off_follows_side(self):
        pb = _pb()
        assert pb.bind_off_at_start(1, 3).endswith("knit to end.")
        assert pb.bind_off_at_start(2, 3).endswith("purl to end.")

    def test_count_clause(self):
        assert _pb().with_count("Knit across.", 40) == "Knit across. (40 sts)"
        assert _pb().with_count("Knit across.", None) == "Knit across."
        assert _pb(include_stitch_counts=False).with_count("Knit across.", 40) == "Knit across."
        side = _pb().with_count("x", 12, TermKey.STITCH_COUNT_SIDE)
        assert side == "x (12 sts remain on this side)"

    def test_notes_hidden_at_minimal(self):
        assert _pb().with_note("a", "b") == "a b"
        assert _pb(verbosity=Verbosity.MINIMAL).with_note("a", "b") == "a"


class TestTechniques:
    def test_named_decreases(self):
        pb = _pb()
        assert pb.decrease(1, Lean.LEFT) == Phrase("ssk", (TermKey.DEC_LEFT_1,))
        assert pb.decrease(2, Lean.RIGHT).text == "k3tog"

    def test_generic_decrease_beyond_two(self):
        phrase = _pb().decrease(3, Lean.LEFT)
        assert phrase.text == "decrease 3 sts"
        assert phrase.techniques == ()

    def test_generic_when_techniques_off(self):
        pb = _pb(use_specific_techniques=False)
        assert pb.decrease(1, Lean.LEFT).text == "decrease 1 sts"
        assert pb.increase(Lean.LEFT).text == "increase 1 sts"

    def test_increase_method(self):
        assert _pb().increase(Lean.RIGHT).text == "M1R"
        assert _pb(increase_method=IncreaseMethod.YARN_OVER).increase(Lean.LEFT).text == "yo"
        kfb = _pb(increase_method=IncreaseMethod.KNIT_FRONT_BACK)
        assert kfb.increase(Lean.RIGHT).text == "kfb"

    def test_crochet_techniques(self):
        pb = _pb(craft=CraftType.CROCHET)
        assert pb.decrease(1, Lean.LEFT).text == "sc2tog"
        assert pb.decrease(2, Lean.RIGHT).text == "sc3tog"

    def test_tail(self):
        """A 1-st decrease works 2 sts; knitting keeps a selvedge st after it."""
        assert _pb().tail(1) == 3
        assert _pb().tail(2, edge_stitches=2) == 5
        assert _pb(craft=CraftType.CROCHET).tail(1) == 2


class TestDescribers:
    def test_edge_decrease_both(self):
        phrase = edge_decrease_both(_DEC_1, _pb())
        assert phrase.text == "K1, ssk, knit to last 3 sts, k2tog, k1."
        assert phrase.techniques == (TermKey.DEC_LEFT_1, TermKey.DEC_RIGHT_1)

    def test_neck_decrease_at_end(self):
        assert neck_decrease_at_end(_DEC_1, _pb()).text == "Knit to last 3 sts, k2tog, k1."

    def test_center_spine(self):
        assert center_spine_increase(_INC_1, _pb()).text == (
            "K1, M1L, knit to center st, M1L, k1, M1R, knit to last st, M1R, k1."
        )

    def test_raglan_round_leans(self):
        text = raglan_increase_round(_INC_1, _pb()).text
        assert text.index("M1R") < text.index("M1L")

    def test_explained_at_detailed(self):
        pb = _pb(verbosity=Verbosity.DETAILED)
        text = pb.explained(edge_decrease_both(_DEC_1, pb))
        assert text.startswith("K1, ssk, knit to last 3 sts, k2tog, k1. ssk: slip 2 sts")
        assert text.endswith("k2tog: knit 2 sts together.")

    def test_explanations_not_repeated(self):
        pb = _pb(verbosity=Verbosity.DETAILED, increase_method=IncreaseMethod.YARN_OVER)
        text = pb.explained(center_spine_increase(_INC_1, pb))
        assert text.count("yo: bring the yarn over") == 1

    def test_explained_plain_at_standard(self):
        pb = _pb()
        assert pb.explained(edge_decrease_both(_DEC_1, pb)) == "K1, ssk, knit to last 3 sts, k2tog, k1."
