"""
Phrase building for the instruction renderer.

Phrasebook binds one terminology table to a RenderConfig and turns numbers
into localized fragments: row labels, count clauses, repeat sentences and
technique tokens. The shaping-row describers at the bottom of the module
turn a ShapingAction into the body text of one shaping row.

No technique text is produced here; every word comes from the terminology
table.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from knitshape.schemas.schedule import FabricSide, ShapingAction
from knitshape.terminology import EXPLANATIONS, CraftType, Language, TermKey, get_registry
from knitshape.terminology.registry import TerminologyRegistry

from .config import IncreaseMethod, RenderConfig


class Lean(str, Enum):
    """Direction a decrease or increase slants; mirrored at opposite edges."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Phrase:
    """Rendered text plus the technique tokens it used."""

    text: str
    techniques: tuple[TermKey, ...] = ()

    def __add__(self, other: Phrase) -> Phrase:
        return Phrase(self.text, self.techniques + other.techniques)


_DECREASES: dict[tuple[int, Lean], TermKey] = {
    (1, Lean.LEFT): TermKey.DEC_LEFT_1,
    (1, Lean.RIGHT): TermKey.DEC_RIGHT_1,
    (2, Lean.LEFT): TermKey.DEC_LEFT_2,
    (2, Lean.RIGHT): TermKey.DEC_RIGHT_2,
}


def side_for_row(row: int) -> FabricSide:
    """Odd rows are right-side rows."""
    return FabricSide.RIGHT_SIDE if row % 2 == 1 else FabricSide.WRONG_SIDE


class Phrasebook:
    """
    Localized fragments for one (craft, language, config) combination.

    Raises KeyError at construction for an unsupported craft/language pair.
    """

    def __init__(
        self,
        craft: CraftType,
        language: Language,
        config: RenderConfig,
        registry: Optional[TerminologyRegistry] = None,
    ) -> None:
        registry = registry or get_registry()
        self.craft = CraftType(craft)
        self.language = Language(language)
        self.config = config
        self._table = registry.table(self.craft, self.language)

    def text(self, key: TermKey, **values: Any) -> str:
        return self._table[key].format(**values)

    # ── Labels ─────────────────────────────────────────────────────────────────

    def row_label(self, row: int, in_rounds: bool = False) -> str:
        numbered = self.config.include_row_numbers
        if in_rounds:
            return self.text(TermKey.ROUND_LABEL, n=row) if numbered else self.text(TermKey.NEXT_ROUND)
        base = self.text(TermKey.ROW_LABEL, n=row) if numbered else self.text(TermKey.NEXT_ROW)
        side = TermKey.RIGHT_SIDE if side_for_row(row) == FabricSide.RIGHT_SIDE else TermKey.WRONG_SIDE
        return f"{base} ({self.text(side)})"

    def range_label(self, start: int, end: int, in_rounds: bool = False) -> str:
        if self.config.include_row_numbers:
            key = TermKey.ROUNDS_RANGE if in_rounds else TermKey.ROWS_RANGE
            return self.text(key, start=start, end=end)
        key = TermKey.NEXT_ROUNDS if in_rounds else TermKey.NEXT_ROWS
        return self.text(key, rows=end - start + 1)

    def line(self, label: str, body: str) -> str:
        return self.text(TermKey.LINE, label=label, body=body)

    # ── Clauses ────────────────────────────────────────────────────────────────

    def with_count(
        self, text: str, count: Optional[int], key: TermKey = TermKey.STITCH_COUNT
    ) -> str:
        """Append the trailing count clause, or nothing when counts are off."""
        if not self.config.include_stitch_counts or count is None:
            return text
        return f"{text} {self.text(key, count=count)}"

    def with_note(self, text: str, note: str) -> str:
        """Append a guidance note unless verbosity is MINIMAL."""
        if not self.config.show_guidance:
            return text
        return f"{text} {note}"

    def explained(self, phrase: Phrase) -> str:
        """Phrase text, followed at DETAILED verbosity by one explanation per technique."""
        if not self.config.explain_techniques:
            return phrase.text
        parts = [phrase.text]
        seen: set[TermKey] = set()
        for key in phrase.techniques:
            if key in seen or key not in EXPLANATIONS:
                continue
            seen.add(key)
            parts.append(self.text(EXPLANATIONS[key]))
        return " ".join(parts)

    # ── Whole sentences ────────────────────────────────────────────────────────

    def plain(self, row: int, in_rounds: bool = False) -> str:
        if in_rounds:
            return self.text(TermKey.PLAIN_ROUND)
        if side_for_row(row) == FabricSide.RIGHT_SIDE:
            return self.text(TermKey.PLAIN_RS)
        return self.text(TermKey.PLAIN_WS)

    def work_even(self, rows: int, in_rounds: bool = False) -> str:
        key = TermKey.WORK_EVEN_ROUNDS if in_rounds else TermKey.WORK_EVEN_ROWS
        return self.text(key, rows=rows)

    def repeat(self, block_rows: int, times: int, in_rounds: bool = False) -> str:
        """'Repeat the last N rows M more times', with singular forms where they apply."""
        if times == 1:
            times_phrase = self.text(TermKey.TIMES_ONE)
        else:
            times_phrase = self.text(TermKey.TIMES_MANY, times=times)
        if block_rows == 1:
            key = TermKey.REPEAT_ROUND if in_rounds else TermKey.REPEAT_ROW
            return self.text(key, times_phrase=times_phrase)
        key = TermKey.REPEAT_ROUNDS if in_rounds else TermKey.REPEAT_ROWS
        return self.text(key, rows=block_rows, times_phrase=times_phrase)

    def cast_on(self, count: int, in_rounds: bool = False) -> str:
        method = self.config.cast_on_method or self.text(TermKey.DEFAULT_CAST_ON_METHOD)
        key = TermKey.CAST_ON_ROUND if in_rounds else TermKey.CAST_ON
        return self.text(key, count=count, method=method)

    def bind_off_at_start(self, row: int, stitches: int) -> str:
        if side_for_row(row) == FabricSide.RIGHT_SIDE:
            return self.text(TermKey.BIND_OFF_START_RS, count=stitches)
        return self.text(TermKey.BIND_OFF_START_WS, count=stitches)

    # ── Technique tokens ───────────────────────────────────────────────────────

    def decrease(self, stitches: int, lean: Lean) -> Phrase:
        """Named decrease for 1 or 2 sts when techniques are on, otherwise generic."""
        key = _DECREASES.get((stitches, lean)) if self.config.use_specific_techniques else None
        if key is None:
            return Phrase(self.text(TermKey.DEC_GENERIC, count=stitches))
        return Phrase(self.text(key), (key,))

    def increase(self, lean: Lean) -> Phrase:
        if not self.config.use_specific_techniques:
            return Phrase(self.text(TermKey.INC_GENERIC, count=1))
        match self.config.increase_method:
            case IncreaseMethod.YARN_OVER:
                key = TermKey.INC_YARN_OVER
            case IncreaseMethod.KNIT_FRONT_BACK:
                key = TermKey.INC_KFB
            case _:
                key = TermKey.INC_LEFT if lean == Lean.LEFT else TermKey.INC_RIGHT
        return Phrase(self.text(key), (key,))

    def tail(self, stitches: int, edge_stitches: int = 1) -> int:
        """
        Stitches left on the needle where the closing decrease starts.

        A decrease of n sts works n + 1 sts together; knitting keeps
        *edge_stitches* plain selvedge stitches after it, crochet one fewer.
        """
        if self.craft == CraftType.CROCHET:
            edge_stitches -= 1
        return stitches + 1 + edge_stitches


# ── Shaping-row describers ─────────────────────────────────────────────────────
#
# Each takes the action and a Phrasebook and returns the body of one shaping
# row. The renderer supplies the label and count clause.

Describer = Callable[[ShapingAction, Phrasebook], Phrase]


def edge_decrease_both(action: ShapingAction, pb: Phrasebook) -> Phrase:
    left = pb.decrease(action.stitches, Lean.LEFT)
    right = pb.decrease(action.stitches, Lean.RIGHT)
    text = pb.text(
        TermKey.EDGE_DEC_BOTH, left=left.text, right=right.text, tail=pb.tail(action.stitches)
    )
    return Phrase(text) + left + right


def raglan_edge_decrease(action: ShapingAction, pb: Phrasebook) -> Phrase:
    left = pb.decrease(action.stitches, Lean.LEFT)
    right = pb.decrease(action.stitches, Lean.RIGHT)
    text = pb.text(
        TermKey.RAGLAN_EDGE_DEC,
        left=left.text,
        right=right.text,
        tail=pb.tail(action.stitches, edge_stitches=2),
    )
    return Phrase(text) + left + right


def neck_decrease_at_start(action: ShapingAction, pb: Phrasebook) -> Phrase:
    dec = pb.decrease(action.stitches, Lean.LEFT)
    return Phrase(pb.text(TermKey.NECK_DEC_AT_START, dec=dec.text)) + dec


def neck_decrease_at_end(action: ShapingAction, pb: Phrasebook) -> Phrase:
    dec = pb.decrease(action.stitches, Lean.RIGHT)
    text = pb.text(TermKey.NECK_DEC_AT_END, dec=dec.text, tail=pb.tail(action.stitches))
    return Phrase(text) + dec


def edge_increase_both(action: ShapingAction, pb: Phrasebook) -> Phrase:
    left = pb.increase(Lean.LEFT)
    right = pb.increase(Lean.RIGHT)
    return Phrase(pb.text(TermKey.EDGE_INC_BOTH, left=left.text, right=right.text)) + left + right


def single_edge_increase(action: ShapingAction, pb: Phrasebook) -> Phrase:
    inc = pb.increase(Lean.LEFT)
    return Phrase(pb.text(TermKey.SINGLE_EDGE_INC, inc=inc.text)) + inc


def single_edge_decrease(action: ShapingAction, pb: Phrasebook) -> Phrase:
    dec = pb.decrease(action.stitches, Lean.LEFT)
    return Phrase(pb.text(TermKey.SINGLE_EDGE_DEC, dec=dec.text)) + dec


def center_spine_increase(action: ShapingAction, pb: Phrasebook) -> Phrase:
    left = pb.increase(Lean.LEFT)
    right = pb.increase(Lean.RIGHT)
    text = pb.text(TermKey.CENTER_SPINE_INC, left=left.text, right=right.text)
    return Phrase(text) + left + right


def raglan_increase_round(action: ShapingAction, pb: Phrasebook) -> Phrase:
    # Right-leaning before each raglan line, left-leaning after it.
    before = pb.increase(Lean.RIGHT)
    after = pb.increase(Lean.LEFT)
    text = pb.text(TermKey.RAGLAN_INC_ROUND, before=before.text, after=after.text)
    return Phrase(text) + before + after
