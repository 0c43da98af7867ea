"""
Rendering configuration.

RenderConfig is the only knob set the renderer takes besides craft and
language. It is a frozen dataclass; from_mapping() builds one from plain
data (e.g. a request body) and rejects keys it does not know.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Optional


class Verbosity(str, Enum):
    MINIMAL = "minimal"  # no guidance notes
    STANDARD = "standard"
    DETAILED = "detailed"  # technique explanations appended


class IncreaseMethod(str, Enum):
    """Increase style for raglan and shawl increase rows."""

    MAKE_ONE = "make_one"  # M1L / M1R pair
    YARN_OVER = "yarn_over"
    KNIT_FRONT_BACK = "kfb"


_BOOL_FIELDS = ("include_stitch_counts", "include_row_numbers", "use_specific_techniques")


@dataclass(frozen=True)
class RenderConfig:
    include_stitch_counts: bool = True
    include_row_numbers: bool = True
    use_specific_techniques: bool = True
    verbosity: Verbosity = Verbosity.STANDARD
    increase_method: Optional[IncreaseMethod] = None
    cast_on_method: Optional[str] = None

    def __post_init__(self) -> None:
        for name in _BOOL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be a bool, got {value!r}")
        if not isinstance(self.verbosity, Verbosity):
            raise ValueError(f"verbosity must be a Verbosity, got {self.verbosity!r}")
        if self.increase_method is not None and not isinstance(
            self.increase_method, IncreaseMethod
        ):
            raise ValueError(
                f"increase_method must be an IncreaseMethod or None, got {self.increase_method!r}"
            )
        if self.cast_on_method is not None and not (
            isinstance(self.cast_on_method, str) and self.cast_on_method.strip()
        ):
            raise ValueError("cast_on_method must be a non-empty string or None")

    @property
    def show_guidance(self) -> bool:
        return self.verbosity != Verbosity.MINIMAL

    @property
    def explain_techniques(self) -> bool:
        return self.verbosity == Verbosity.DETAILED

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RenderConfig:
        """
        Build a RenderConfig from plain data.

        Parameters
        ----------
        data:
            Mapping of field name to value. ``verbosity`` and
            ``increase_method`` may be given as their string values.

        Raises
        ------
        ValueError
            On an unknown key or an invalid value.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown render config keys: {', '.join(unknown)}")

        values = dict(data)
        try:
            if "verbosity" in values and not isinstance(values["verbosity"], Verbosity):
                values["verbosity"] = Verbosity(values["verbosity"])
            method = values.get("increase_method")
            if method is not None and not isinstance(method, IncreaseMethod):
                values["increase_method"] = IncreaseMethod(method)
        except ValueError as exc:
            raise ValueError(f"Invalid render config value: {exc}") from exc
        return cls(**values)


DEFAULT_CONFIG = RenderConfig()
