"""
Vocabulary for the terminology tables.

TermKey names every token and sentence template the instruction renderer
uses. Sentence templates are ``str.format`` strings; the placeholders each
one expects are listed next to its key.
"""

from __future__ import annotations

from enum import Enum


class CraftType(str, Enum):
    KNITTING = "knitting"
    CROCHET = "crochet"


class Language(str, Enum):
    EN = "en"
    FR = "fr"


class TermKey(str, Enum):
    """Every entry a (craft, language) terminology table must define."""

    # ── Labels and structure (language level) ─────────────────────────────────
    ROW_LABEL = "row_label"  # {n}
    ROUND_LABEL = "round_label"  # {n}
    NEXT_ROW = "next_row"
    NEXT_ROUND = "next_round"
    ROWS_RANGE = "rows_range"  # {start} {end}
    ROUNDS_RANGE = "rounds_range"  # {start} {end}
    NEXT_ROWS = "next_rows"  # {rows}
    NEXT_ROUNDS = "next_rounds"  # {rows}
    RIGHT_SIDE = "right_side"
    WRONG_SIDE = "wrong_side"
    STITCH_COUNT = "stitch_count"  # {count}
    STITCH_COUNT_SIDE = "stitch_count_side"  # {count}
    TIMES_ONE = "times_one"
    TIMES_MANY = "times_many"  # {times}
    REPEAT_ROWS = "repeat_rows"  # {rows} {times_phrase}
    REPEAT_ROW = "repeat_row"  # {times_phrase}
    REPEAT_ROUNDS = "repeat_rounds"  # {rows} {times_phrase}
    REPEAT_ROUND = "repeat_round"  # {times_phrase}
    WORK_EVEN_ROWS = "work_even_rows"  # {rows}
    WORK_EVEN_ROUNDS = "work_even_rounds"  # {rows}
    LINE = "line"  # {label} {body}

    # ── Section and guidance sentences (language level) ───────────────────────
    NECK_LEFT_SETUP = "neck_left_setup"  # {count}
    NECK_RIGHT_SETUP = "neck_right_setup"  # {count}
    NOTE_HOLD = "note_hold"  # {count}
    NOTE_NO_TWIST = "note_no_twist"
    NOTE_MIRROR = "note_mirror"
    RAGLAN_MARKERS = "raglan_markers"  # {back} {front} {sleeve} {line}
    SECTION_SLEEVE = "section_sleeve"
    SECTION_BODY = "section_body"
    SECTION_ASSEMBLY = "section_assembly"
    HAMMER_EXTENSION = "hammer_extension"  # {count} {rows}
    HAMMER_DIVIDE = "hammer_divide"  # {count} {held}
    HAMMER_LEFT_STRAP = "hammer_left_strap"  # {count} {rows}
    HAMMER_RIGHT_STRAP = "hammer_right_strap"  # {count} {rows}
    ASSEMBLY_SHOULDER = "assembly_shoulder"
    ASSEMBLY_CAP = "assembly_cap"
    ASSEMBLY_SEAMS = "assembly_seams"

    # ── Craft techniques ──────────────────────────────────────────────────────
    DEFAULT_CAST_ON_METHOD = "default_cast_on_method"
    DEC_LEFT_1 = "dec_left_1"
    DEC_RIGHT_1 = "dec_right_1"
    DEC_LEFT_2 = "dec_left_2"
    DEC_RIGHT_2 = "dec_right_2"
    DEC_GENERIC = "dec_generic"  # {count}
    INC_LEFT = "inc_left"
    INC_RIGHT = "inc_right"
    INC_YARN_OVER = "inc_yarn_over"
    INC_KFB = "inc_kfb"
    INC_GENERIC = "inc_generic"  # {count}
    EXPLAIN_DEC_LEFT_1 = "explain_dec_left_1"
    EXPLAIN_DEC_RIGHT_1 = "explain_dec_right_1"
    EXPLAIN_DEC_LEFT_2 = "explain_dec_left_2"
    EXPLAIN_DEC_RIGHT_2 = "explain_dec_right_2"
    EXPLAIN_INC_LEFT = "explain_inc_left"
    EXPLAIN_INC_RIGHT = "explain_inc_right"
    EXPLAIN_INC_YARN_OVER = "explain_inc_yarn_over"
    EXPLAIN_INC_KFB = "explain_inc_kfb"

    # ── Craft sentences ───────────────────────────────────────────────────────
    CAST_ON = "cast_on"  # {count} {method}
    CAST_ON_ROUND = "cast_on_round"  # {count} {method}
    PLAIN_RS = "plain_rs"
    PLAIN_WS = "plain_ws"
    PLAIN_ROUND = "plain_round"
    BIND_OFF_START_RS = "bind_off_start_rs"  # {count}
    BIND_OFF_START_WS = "bind_off_start_ws"  # {count}
    BIND_OFF_ALL = "bind_off_all"  # {count}
    CENTER_DIVISION = "center_division"  # {first} {center}
    NECK_DEC_AT_START = "neck_dec_at_start"  # {dec}
    NECK_DEC_AT_END = "neck_dec_at_end"  # {dec} {tail}
    EDGE_DEC_BOTH = "edge_dec_both"  # {left} {right} {tail}
    RAGLAN_EDGE_DEC = "raglan_edge_dec"  # {left} {right} {tail}
    EDGE_INC_BOTH = "edge_inc_both"  # {left} {right}
    SINGLE_EDGE_INC = "single_edge_inc"  # {inc}
    SINGLE_EDGE_DEC = "single_edge_dec"  # {dec}
    CENTER_SPINE_INC = "center_spine_inc"  # {left} {right}
    RAGLAN_INC_ROUND = "raglan_inc_round"  # {before} {after}
    SEPARATION = "separation"  # {back} {front} {sleeve} {underarm}
    NOTE_BORDER = "note_border"  # {count}


# Technique token -> explanation appended at DETAILED verbosity.
EXPLANATIONS: dict[TermKey, TermKey] = {
    TermKey.DEC_LEFT_1: TermKey.EXPLAIN_DEC_LEFT_1,
    TermKey.DEC_RIGHT_1: TermKey.EXPLAIN_DEC_RIGHT_1,
    TermKey.DEC_LEFT_2: TermKey.EXPLAIN_DEC_LEFT_2,
    TermKey.DEC_RIGHT_2: TermKey.EXPLAIN_DEC_RIGHT_2,
    TermKey.INC_LEFT: TermKey.EXPLAIN_INC_LEFT,
    TermKey.INC_RIGHT: TermKey.EXPLAIN_INC_RIGHT,
    TermKey.INC_YARN_OVER: TermKey.EXPLAIN_INC_YARN_OVER,
    TermKey.INC_KFB: TermKey.EXPLAIN_INC_KFB,
}
