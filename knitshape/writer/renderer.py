"""
render_instructions: the one public rendering entry point.

Pipeline for a single schedule:
  1. Resolve the craft/language pair and the RenderConfig; build a Phrasebook
     over the matching terminology table.
  2. Dispatch on the schedule type to its topology renderer, which folds the
     schedule's actions into DetailedInstructions.
  3. Return a RenderResult. A schedule the renderer cannot work (missing
     field, inconsistent counts, unsupported shape) becomes an unsuccessful
     result with a RenderError; nothing is partially rendered.

TemplateInstructionWriter wraps the same call behind the InstructionWriter
Protocol so that LLMInstructionWriter can stand in for it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Protocol, Union, runtime_checkable

from knitshape.schemas.results import ErrorCode, RenderError, RenderResult
from knitshape.schemas.schedule import (
    ArmholeSchedule,
    HammerSleeveSchedule,
    NecklineSchedule,
    RaglanSchedule,
    ShapingSchedule,
    ShawlSchedule,
)
from knitshape.terminology import CraftType, Language

from .armhole import render_armhole
from .config import DEFAULT_CONFIG, RenderConfig
from .fold import RenderContext, ScheduleError
from .hammer_sleeve import render_hammer_sleeve
from .instructions import DetailedInstruction
from .neckline import render_neckline
from .raglan import render_raglan
from .shawl import render_shawl
from .templates import Phrasebook

logger = logging.getLogger(__name__)

TopologyRenderer = Callable[[Any, RenderContext, list[str]], list[DetailedInstruction]]

_RENDERERS: dict[type, TopologyRenderer] = {
    NecklineSchedule: render_neckline,
    ArmholeSchedule: render_armhole,
    RaglanSchedule: render_raglan,
    HammerSleeveSchedule: render_hammer_sleeve,
    ShawlSchedule: render_shawl,
}


def _failure(code: ErrorCode, message: str, field: Optional[str] = None) -> RenderResult:
    logger.warning(f"Rendering failed [{code.value}]: {message}")
    return RenderResult(success=False, error=RenderError(code=code, message=message, field=field))


def render_instructions(
    schedule: Optional[ShapingSchedule],
    craft_type: Union[CraftType, str],
    language: Union[Language, str],
    config: Union[RenderConfig, Mapping[str, Any], None] = None,
) -> RenderResult:
    """
    Render one shaping schedule into ordered, localized instructions.

    Parameters
    ----------
    schedule:
        Any schedule produced by a ``calculate_*_shaping`` function.
    craft_type:
        ``CraftType`` or its string value (``"knitting"``, ``"crochet"``).
    language:
        ``Language`` or its string value (``"en"``, ``"fr"``).
    config:
        A RenderConfig, a plain mapping accepted by
        ``RenderConfig.from_mapping``, or None for the defaults.

    Returns
    -------
    RenderResult
        On success, every instruction in step order plus advisory warnings.
        On failure, a RenderError and no instructions:

        - ``MISSING_CALCULATIONS`` when the schedule or a required field is absent;
        - ``INVALID_SCHEDULE`` when a field is negative or the actions do not
          add up (overlapping rows, counts that go below zero or miss the
          schedule's own totals);
        - ``UNSUPPORTED_COMBINATION`` for an unknown craft, language,
          schedule type or shaping shape;
        - ``INVALID_INPUT`` for a config mapping that does not validate.
    """
    if schedule is None:
        return _failure(ErrorCode.MISSING_CALCULATIONS, "No schedule to render", "schedule")

    try:
        craft = CraftType(craft_type)
        lang = Language(language)
    except ValueError:
        return _failure(
            ErrorCode.UNSUPPORTED_COMBINATION,
            f"Unsupported craft/language combination: {craft_type!r}/{language!r}",
        )

    if config is None:
        config = DEFAULT_CONFIG
    elif not isinstance(config, RenderConfig):
        try:
            config = RenderConfig.from_mapping(config)
        except (TypeError, ValueError) as exc:
            return _failure(ErrorCode.INVALID_INPUT, str(exc), "config")

    renderer = _RENDERERS.get(type(schedule))
    if renderer is None:
        return _failure(
            ErrorCode.UNSUPPORTED_COMBINATION,
            f"No renderer for schedule type {type(schedule).__name__}",
            "schedule",
        )

    try:
        phrases = Phrasebook(craft, lang, config)
    except KeyError:
        return _failure(
            ErrorCode.UNSUPPORTED_COMBINATION,
            f"No terminology for {craft.value}/{lang.value}",
        )

    warnings: list[str] = []
    try:
        instructions = renderer(schedule, RenderContext(phrases=phrases), warnings)
    except ScheduleError as exc:
        return _failure(exc.code, exc.message, exc.field)

    for warning in warnings:
        logger.info(f"Render warning for {schedule.topology.value}: {warning}")
    logger.debug(
        f"Rendered {len(instructions)} instructions for {schedule.topology.value} "
        f"({craft.value}/{lang.value})"
    )
    return RenderResult(success=True, instructions=tuple(instructions), warnings=tuple(warnings))


# ── Writer protocol ────────────────────────────────────────────────────────────


@runtime_checkable
class InstructionWriter(Protocol):
    """Protocol for instruction writers."""

    def write(
        self,
        schedule: ShapingSchedule,
        craft_type: Union[CraftType, str],
        language: Union[Language, str],
        config: Union[RenderConfig, Mapping[str, Any], None] = None,
    ) -> RenderResult: ...


class TemplateInstructionWriter:
    """Deterministic writer: every word comes from the terminology tables."""

    def write(
        self,
        schedule: ShapingSchedule,
        craft_type: Union[CraftType, str],
        language: Union[Language, str],
        config: Union[RenderConfig, Mapping[str, Any], None] = None,
    ) -> RenderResult:
        return render_instructions(schedule, craft_type, language, config)
