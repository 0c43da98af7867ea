"""
Shaping schedule model: the shared vocabulary between calculators and the
instruction renderer.

A ShapingAction is one bind-off, decrease or increase, optionally repeated on
a fixed row cadence. A schedule is the ordered set of actions for one garment
component plus the totals a renderer needs to seed its running counts.

Row offsets are 1-based and relative to the start of the action's shaping
phase; row 1 of every phase is a right-side row.

All types are frozen dataclasses. Structural invariants are checked in
__post_init__; range checks on the numbers themselves belong to the
calculators (on the way in) and the renderer (on the way out).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union


class ActionType(str, Enum):
    """Kind of stitch-count change performed by an action."""

    BIND_OFF = "bind_off"
    DECREASE = "decrease"
    INCREASE = "increase"


class FabricSide(str, Enum):
    """Face of the fabric an action is worked on."""

    RIGHT_SIDE = "RS"
    WRONG_SIDE = "WS"
    BOTH = "both"


class Topology(str, Enum):
    """Construction topology a schedule belongs to."""

    NECKLINE = "neckline"
    ARMHOLE = "armhole"
    RAGLAN_TOP_DOWN = "raglan_top_down"
    HAMMER_SLEEVE = "hammer_sleeve"
    TRIANGULAR_SHAWL = "triangular_shawl"


@dataclass(frozen=True)
class ShapingAction:
    """
    A single shaping action, optionally repeated every N rows.

    ``stitches`` is the count changed at one edge by one occurrence. Whether
    the action is mirrored onto a second edge is a property of the schedule
    that owns it, not of the action.
    """

    action_type: ActionType
    stitches: int
    row_offset: int
    side_of_fabric: FabricSide
    repeats: Optional[int] = None
    every_n_rows: Optional[int] = None

    def __post_init__(self) -> None:
        if self.stitches < 1:
            raise ValueError(f"stitches must be >= 1, got {self.stitches}")
        if self.row_offset < 1:
            raise ValueError(f"row_offset must be >= 1, got {self.row_offset}")
        if self.repeats is not None:
            if self.repeats < 1:
                raise ValueError(f"repeats must be >= 1, got {self.repeats}")
            if self.every_n_rows is None or self.every_n_rows < 1:
                raise ValueError(
                    f"every_n_rows must be set and >= 1 when repeats is set, "
                    f"got {self.every_n_rows}"
                )
        elif self.every_n_rows is not None and self.every_n_rows < 1:
            raise ValueError(f"every_n_rows must be >= 1, got {self.every_n_rows}")

    @property
    def repeat_count(self) -> int:
        """Number of occurrences; 1 when the action is not repeated."""
        return self.repeats or 1

    @property
    def has_repeat(self) -> bool:
        return self.repeat_count > 1

    @property
    def total_stitches(self) -> int:
        """Stitches changed at one edge across all occurrences."""
        return self.stitches * self.repeat_count

    @property
    def rows_spanned(self) -> int:
        """Rows from the first occurrence to the last, inclusive."""
        if not self.has_repeat:
            return 1
        return (self.repeat_count - 1) * (self.every_n_rows or 1) + 1

    @property
    def last_row(self) -> int:
        return self.row_offset + self.rows_spanned - 1

    @property
    def block_last_row(self) -> int:
        """
        Last row of the final repeat block.

        A repeated action is worked as a block of ``every_n_rows`` rows: the
        shaping row followed by plain rows. Unrepeated actions occupy one row.
        """
        if not self.has_repeat:
            return self.last_row
        return self.last_row + (self.every_n_rows or 1) - 1

    @property
    def sign(self) -> int:
        return 1 if self.action_type == ActionType.INCREASE else -1

    @property
    def signed_delta(self) -> int:
        """Per-edge stitch change over all occurrences (negative for losses)."""
        return self.sign * self.total_stitches


# ── Neckline ───────────────────────────────────────────────────────────────────


class NecklineKind(str, Enum):
    ROUNDED = "rounded"
    SCOOP = "scoop"
    V_NECK = "v_neck"


@dataclass(frozen=True)
class NecklineSchedule:
    """
    Front neckline shaping: a center bind-off followed by mirrored side flows.

    Each side is rendered on its own stitches after the center division, so
    the per-side actions are applied once per side rather than doubled.
    """

    topology: ClassVar[Topology] = Topology.NECKLINE

    kind: NecklineKind
    center_bind_off_stitches: int
    left_side: tuple[ShapingAction, ...]
    right_side: tuple[ShapingAction, ...]
    total_rows: int
    final_shoulder_stitches_each_side: int
    panel_stitches: int
    neckline_width_stitches: int

    def __post_init__(self) -> None:
        if len(self.left_side) != len(self.right_side):
            raise ValueError(
                f"neckline sides must mirror each other, got {len(self.left_side)} left "
                f"and {len(self.right_side)} right actions"
            )
        for left, right in zip(self.left_side, self.right_side):
            if left != right:
                raise ValueError(f"neckline sides must mirror each other: {left} != {right}")

    @property
    def starting_stitches(self) -> int:
        return self.panel_stitches

    @property
    def decrease_stitches_each_side(self) -> int:
        return sum(a.total_stitches for a in self.left_side)


# ── Armhole ────────────────────────────────────────────────────────────────────


class ArmholeKind(str, Enum):
    ROUNDED_SET_IN = "rounded_set_in"
    RAGLAN = "raglan"


@dataclass(frozen=True)
class ArmholeSchedule:
    """
    Armhole shaping for one panel, represented once for both armhole edges.

    The first action is the base bind-off (worked at the start of two
    consecutive rows); every later action happens at both ends of its row.
    """

    topology: ClassVar[Topology] = Topology.ARMHOLE
    edges: ClassVar[int] = 2

    kind: ArmholeKind
    base_bind_off_stitches: int
    actions: tuple[ShapingAction, ...]
    total_rows: int
    final_stitches_at_shoulder_edge: int
    panel_stitches: int

    @property
    def starting_stitches(self) -> int:
        return self.panel_stitches

    @property
    def stitches_removed_each_edge(self) -> int:
        return sum(a.total_stitches for a in self.actions)

    @property
    def final_panel_stitches(self) -> int:
        return self.panel_stitches - self.edges * self.stitches_removed_each_edge


# ── Raglan top-down ────────────────────────────────────────────────────────────


RAGLAN_LINES = 4


@dataclass(frozen=True)
class RaglanDistribution:
    """Cast-on stitches split between panels, sleeves and the 4 raglan lines."""

    back: int
    front: int
    sleeve_left: int
    sleeve_right: int
    raglan_line_each: int

    @property
    def total(self) -> int:
        return (
            self.back
            + self.front
            + self.sleeve_left
            + self.sleeve_right
            + RAGLAN_LINES * self.raglan_line_each
        )


@dataclass(frozen=True)
class RaglanShaping:
    """Increase cadence along the raglan lines."""

    line_length_rows: int
    increase_frequency: int
    total_increase_rounds: int
    increases_per_sleeve: int
    increases_per_body_panel: int
    stitches_per_round: int = 2 * RAGLAN_LINES


@dataclass(frozen=True)
class RaglanSeparation:
    """Live stitch counts at the round where sleeves leave the body."""

    body_total_stitches: int
    sleeve_each_stitches: int
    underarm_cast_on_stitches: int
    front_stitches: int
    back_stitches: int

    @property
    def body_after_underarm(self) -> int:
        return self.body_total_stitches + 2 * self.underarm_cast_on_stitches


@dataclass(frozen=True)
class RaglanSchedule:
    """
    Top-down raglan yoke from neckline cast-on to sleeve separation.

    Every increase round adds one stitch on each side of each raglan line,
    so the live count grows by exactly ``stitches_per_round`` per round.
    """

    topology: ClassVar[Topology] = Topology.RAGLAN_TOP_DOWN

    neckline_cast_on_total: int
    initial_distribution: RaglanDistribution
    raglan_shaping: RaglanShaping
    separation: RaglanSeparation
    target_body_stitches: int
    target_sleeve_stitches: int

    def __post_init__(self) -> None:
        if self.initial_distribution.total != self.neckline_cast_on_total:
            raise ValueError(
                f"initial distribution sums to {self.initial_distribution.total}, "
                f"expected neckline cast-on {self.neckline_cast_on_total}"
            )

    @property
    def starting_stitches(self) -> int:
        return self.neckline_cast_on_total

    @property
    def stitches_before_separation(self) -> int:
        shaping = self.raglan_shaping
        return self.neckline_cast_on_total + shaping.stitches_per_round * shaping.total_increase_rounds

    @property
    def increase_action(self) -> Optional[ShapingAction]:
        """The repeated raglan increase, 2 sts per raglan line; None if no rounds."""
        rounds = self.raglan_shaping.total_increase_rounds
        if rounds == 0:
            return None
        return ShapingAction(
            action_type=ActionType.INCREASE,
            stitches=self.raglan_shaping.stitches_per_round // RAGLAN_LINES,
            row_offset=2,
            side_of_fabric=FabricSide.RIGHT_SIDE,
            repeats=rounds,
            every_n_rows=self.raglan_shaping.increase_frequency,
        )


# ── Hammer sleeve ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HammerExtension:
    """Narrow strip at the top of the sleeve cap that becomes the shoulder."""

    width_cm: float
    width_stitches: int
    length_rows: int


@dataclass(frozen=True)
class HammerVerticalPart:
    """Full-width straight section of the sleeve cap that fills the cutout."""

    width_stitches: int
    height_rows: int


@dataclass(frozen=True)
class HammerBodyPanel:
    """Rectangular armhole cutout on the front and back panels."""

    shoulder_strap_width_stitches: int
    armhole_cutout_width_stitches: int
    armhole_depth_rows: int
    bind_off_for_cutout_stitches: int
    body_width_at_chest_stitches: int

    @property
    def stitches_after_cutout(self) -> int:
        return self.body_width_at_chest_stitches - 2 * self.bind_off_for_cutout_stitches


@dataclass(frozen=True)
class HammerSleeveSchedule:
    topology: ClassVar[Topology] = Topology.HAMMER_SLEEVE

    extension: HammerExtension
    vertical_part: HammerVerticalPart
    body_panel: HammerBodyPanel
    sleeve_rows_to_cap: int
    body_rows_to_armhole: int

    @property
    def starting_stitches(self) -> int:
        return self.vertical_part.width_stitches

    @property
    def cutout_action(self) -> Optional[ShapingAction]:
        """Cutout bind-off, worked at the start of two rows (one per edge)."""
        stitches = self.body_panel.bind_off_for_cutout_stitches
        if stitches < 1:
            return None
        return ShapingAction(
            action_type=ActionType.BIND_OFF,
            stitches=stitches,
            row_offset=1,
            side_of_fabric=FabricSide.BOTH,
        )


# ── Triangular shawl ───────────────────────────────────────────────────────────


class ShawlMethod(str, Enum):
    TOP_DOWN_CENTER_OUT = "top_down_center_out"
    SIDE_TO_SIDE = "side_to_side"
    BOTTOM_UP = "bottom_up"


class WorkStyle(str, Enum):
    FLAT = "flat"
    IN_THE_ROUND = "in_the_round"


@dataclass(frozen=True)
class ShawlPhase:
    """
    One shaping phase of a shawl.

    ``total_shaping_rows`` counts shaping events (not rows), matching the
    pattern-writing convention "increase every 2nd row 40 times".
    """

    name: str
    action_type: ActionType
    description: str
    total_shaping_rows: int
    stitches_per_event: int
    total_rows_in_phase: int
    shaping_frequency: int

    @property
    def stitch_delta(self) -> int:
        sign = 1 if self.action_type == ActionType.INCREASE else -1
        return sign * self.stitches_per_event * self.total_shaping_rows

    def to_action(self) -> Optional[ShapingAction]:
        if self.total_shaping_rows < 1:
            return None
        return ShapingAction(
            action_type=self.action_type,
            stitches=self.stitches_per_event,
            row_offset=1,
            side_of_fabric=FabricSide.RIGHT_SIDE,
            repeats=self.total_shaping_rows,
            every_n_rows=self.shaping_frequency,
        )


@dataclass(frozen=True)
class ShawlSchedule:
    topology: ClassVar[Topology] = Topology.TRIANGULAR_SHAWL

    method: ShawlMethod
    work_style: WorkStyle
    cast_on_stitches: int
    phases: tuple[ShawlPhase, ...]
    final_stitch_count: int
    border_stitches_each_side: int = 0

    def __post_init__(self) -> None:
        expected = self.cast_on_stitches + sum(p.stitch_delta for p in self.phases)
        if expected != self.final_stitch_count:
            raise ValueError(
                f"shawl phases end at {expected} sts, schedule says {self.final_stitch_count}"
            )

    @property
    def starting_stitches(self) -> int:
        return self.cast_on_stitches + 2 * self.border_stitches_each_side

    @property
    def total_rows(self) -> int:
        return sum(p.total_rows_in_phase for p in self.phases)


ShapingSchedule = Union[
    NecklineSchedule,
    ArmholeSchedule,
    RaglanSchedule,
    HammerSleeveSchedule,
    ShawlSchedule,
]
