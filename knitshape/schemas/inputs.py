"""
Closed input records, one per construction topology.

Each record carries the component key and the resolved gauge alongside the
topology's physical parameters. Records are frozen and perform no range
checks of their own: the calculators validate them and report problems as a
ValidationError result rather than raising.

from_mapping() is the boundary for free-form data (e.g. a decoded JSON body):
it converts enum strings and nested gauge / ratio / ease mappings and rejects
unknown or missing fields explicitly instead of silently defaulting them.
"""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Mapping, Optional, TypeVar

from knitshape.utilities.types import Gauge, MeasurementUnit

from .schedule import ArmholeKind, NecklineKind, ShawlMethod, WorkStyle


class InputFieldError(ValueError):
    """Raised by from_mapping() for unknown, missing or malformed fields."""


def _require_numbers(record: Any, *names: str) -> None:
    for name in names:
        value = getattr(record, name)
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise InputFieldError(
                f"{type(record).__name__}.{name} must be a number, got {value!r}"
            )


# ── Tuning ratios ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NecklineRatios:
    """
    Proportions for the two-tranche rounded/scoop neckline.

    ``center_ratio`` is the share of the neckline width bound off at the
    center; ``rapid_ratio`` is the share of each side's stitches removed in the
    rapid tranche (2 sts per event). The rest go 1 st at a time.
    """

    center_ratio: float = 1 / 3
    rapid_ratio: float = 1 / 3
    rapid_interval: int = 2
    gradual_interval: int = 4

    def __post_init__(self) -> None:
        _require_numbers(self, "center_ratio", "rapid_ratio", "rapid_interval", "gradual_interval")
        if not 0 < self.center_ratio < 1:
            raise ValueError(f"center_ratio must be in (0, 1), got {self.center_ratio}")
        if not 0 <= self.rapid_ratio <= 1:
            raise ValueError(f"rapid_ratio must be in [0, 1], got {self.rapid_ratio}")
        if self.rapid_interval < 1 or self.gradual_interval < 1:
            raise ValueError(
                f"intervals must be >= 1, got {self.rapid_interval}/{self.gradual_interval}"
            )


ROUNDED_NECKLINE_RATIOS = NecklineRatios()
SCOOP_NECKLINE_RATIOS = NecklineRatios(center_ratio=0.4, rapid_ratio=0.4)


@dataclass(frozen=True)
class ArmholeRatios:
    """Proportions for the rounded set-in armhole (base bind-off, rapid, gradual)."""

    base_ratio: float = 1 / 4
    rapid_ratio: float = 1 / 2
    rapid_interval: int = 2
    gradual_interval: int = 4

    def __post_init__(self) -> None:
        _require_numbers(self, "base_ratio", "rapid_ratio", "rapid_interval", "gradual_interval")
        if not 0 < self.base_ratio < 1:
            raise ValueError(f"base_ratio must be in (0, 1), got {self.base_ratio}")
        if not 0 <= self.rapid_ratio <= 1:
            raise ValueError(f"rapid_ratio must be in [0, 1], got {self.rapid_ratio}")
        if self.rapid_interval < 1 or self.gradual_interval < 1:
            raise ValueError(
                f"intervals must be >= 1, got {self.rapid_interval}/{self.gradual_interval}"
            )


ROUNDED_ARMHOLE_RATIOS = ArmholeRatios()


@dataclass(frozen=True)
class RaglanEase:
    """Ease added to the neckline, body and sleeve circumferences (cm)."""

    neckline_cm: float = 2.0
    body_cm: float = 5.0
    sleeve_cm: float = 3.0


# ── Mapping conversion ─────────────────────────────────────────────────────────

_GAUGE_FIELDS = frozenset({"stitches_per_ref_length", "rows_per_ref_length", "reference_length", "unit"})


def _coerce_gauge(value: Any) -> Gauge:
    if isinstance(value, Gauge):
        return value
    if not isinstance(value, Mapping):
        raise InputFieldError(f"gauge must be a Gauge or a mapping, got {type(value).__name__}")
    unknown = set(value) - _GAUGE_FIELDS
    if unknown:
        raise InputFieldError(f"gauge: unknown field(s) {sorted(unknown)}")
    missing = {"stitches_per_ref_length", "rows_per_ref_length"} - set(value)
    if missing:
        raise InputFieldError(f"gauge: missing field(s) {sorted(missing)}")
    kwargs = dict(value)
    if "unit" in kwargs:
        kwargs["unit"] = _coerce_enum(MeasurementUnit)(kwargs["unit"])
    # Gauge raises InvalidGauge (a ValueError) for non-positive rates.
    return Gauge(**kwargs)


E = TypeVar("E", bound=Enum)


def _coerce_enum(enum_cls: type[E]) -> Callable[[Any], E]:
    def convert(value: Any) -> E:
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ", ".join(repr(m.value) for m in enum_cls)
            raise InputFieldError(
                f"{value!r} is not a valid {enum_cls.__name__} (expected one of {allowed})"
            ) from None

    return convert


def _coerce_record(record_cls: type) -> Callable[[Any], Any]:
    def convert(value: Any) -> Any:
        if value is None or isinstance(value, record_cls):
            return value
        if not isinstance(value, Mapping):
            raise InputFieldError(
                f"{record_cls.__name__} must be a mapping, got {type(value).__name__}"
            )
        names = {f.name for f in fields(record_cls)}
        unknown = set(value) - names
        if unknown:
            raise InputFieldError(f"{record_cls.__name__}: unknown field(s) {sorted(unknown)}")
        return record_cls(**value)

    return convert


R = TypeVar("R", bound="ComponentInput")


@dataclass(frozen=True)
class ComponentInput:
    """Base for the per-topology input records."""

    _converters: ClassVar[dict[str, Callable[[Any], Any]]] = {}

    @classmethod
    def from_mapping(cls: type[R], data: Mapping[str, Any]) -> R:
        """
        Build a record from a free-form mapping.

        Raises
        ------
        InputFieldError
            If *data* has unknown keys, lacks a required key, or holds a value
            that cannot be converted (e.g. an unknown enum string).
        InvalidGauge
            If the nested gauge has a non-positive rate.
        """
        if not isinstance(data, Mapping):
            raise InputFieldError(f"expected a mapping, got {type(data).__name__}")
        record_fields = fields(cls)
        names = {f.name for f in record_fields}
        unknown = set(data) - names
        if unknown:
            raise InputFieldError(f"{cls.__name__}: unknown field(s) {sorted(unknown)}")
        missing = [
            f.name
            for f in record_fields
            if f.default is MISSING and f.default_factory is MISSING and f.name not in data
        ]
        if missing:
            raise InputFieldError(f"{cls.__name__}: missing field(s) {missing}")

        kwargs: dict[str, Any] = {}
        for name, value in data.items():
            converter = cls._converters.get(name)
            if name == "gauge":
                converter = _coerce_gauge
            try:
                kwargs[name] = converter(value) if converter else value
            except InputFieldError as exc:
                raise InputFieldError(f"{cls.__name__}.{name}: {exc}") from None
        return cls(**kwargs)

    def summary(self) -> MappingProxyType[str, Any]:
        """Flat, JSON-friendly view of the input for result metadata."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Gauge):
                out["stitches_per_10cm"] = round(value.stitches_per_10cm, 2)
                out["rows_per_10cm"] = round(value.rows_per_10cm, 2)
            elif isinstance(value, Enum):
                out[f.name] = value.value
            elif isinstance(value, (int, float, str)) or value is None:
                out[f.name] = value
        return MappingProxyType(out)


# ── Topology inputs ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NecklineInput(ComponentInput):
    """Front neckline of one panel."""

    _converters: ClassVar[dict[str, Callable[[Any], Any]]] = {
        "kind": _coerce_enum(NecklineKind),
        "ratios": _coerce_record(NecklineRatios),
    }

    component_key: str
    gauge: Gauge
    kind: NecklineKind
    depth_cm: float
    width_cm: float
    panel_width_stitches: int
    shoulder_width_cm: float
    ratios: Optional[NecklineRatios] = None


@dataclass(frozen=True)
class ArmholeInput(ComponentInput):
    """Both armhole edges of one body panel."""

    _converters: ClassVar[dict[str, Callable[[Any], Any]]] = {
        "kind": _coerce_enum(ArmholeKind),
        "ratios": _coerce_record(ArmholeRatios),
    }

    component_key: str
    gauge: Gauge
    kind: ArmholeKind
    depth_cm: float
    width_cm: float
    panel_width_stitches: int
    shoulder_width_cm: float
    raglan_line_length_cm: Optional[float] = None
    ratios: Optional[ArmholeRatios] = None


@dataclass(frozen=True)
class RaglanInput(ComponentInput):
    """Top-down raglan yoke worked in the round from the neckline."""

    _converters: ClassVar[dict[str, Callable[[Any], Any]]] = {
        "ease": _coerce_record(RaglanEase),
    }

    component_key: str
    gauge: Gauge
    bust_circumference_cm: float
    body_length_cm: float
    sleeve_length_cm: float
    upper_arm_circumference_cm: float
    neckline_depth_cm: float
    neckline_circumference_cm: float
    raglan_line_stitches: int = 2
    ease: RaglanEase = field(default_factory=RaglanEase)


@dataclass(frozen=True)
class HammerSleeveInput(ComponentInput):
    """Hammer sleeve: sleeve cap extension plus the matching body cutout."""

    component_key: str
    gauge: Gauge
    total_shoulder_width_cm: float
    upper_arm_width_cm: float
    armhole_depth_cm: float
    neckline_width_cm: float
    extension_length_rows: int = 10
    sleeve_length_cm: Optional[float] = None
    body_length_to_armhole_cm: Optional[float] = None


@dataclass(frozen=True)
class ShawlInput(ComponentInput):
    """Triangular shawl sized by wingspan and center depth."""

    _converters: ClassVar[dict[str, Callable[[Any], Any]]] = {
        "method": _coerce_enum(ShawlMethod),
        "work_style": _coerce_enum(WorkStyle),
    }

    component_key: str
    gauge: Gauge
    method: ShawlMethod
    target_wingspan_cm: float
    target_depth_cm: float
    border_stitches_each_side: int = 0
    work_style: WorkStyle = WorkStyle.FLAT
