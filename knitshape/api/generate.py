"""
Public per-component API.

generate_component_instructions() is the single entry point an orchestrator
needs: it takes one component's topology and resolved parameters, calculates
the shaping schedule, and renders it for a craft and language. Both result
envelopes are returned so the caller can persist the schedule and display the
instructions independently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from knitshape.calculators import (
    calculate_armhole_shaping,
    calculate_hammer_sleeve_shaping,
    calculate_neckline_shaping,
    calculate_raglan_shaping,
    calculate_shawl_shaping,
)
from knitshape.schemas.inputs import ComponentInput
from knitshape.schemas.results import (
    CalculationResult,
    ErrorCode,
    RenderResult,
    Severity,
    ValidationError,
    ValidationMessage,
)
from knitshape.schemas.schedule import Topology
from knitshape.terminology import CraftType, Language
from knitshape.writer.config import RenderConfig
from knitshape.writer.renderer import InstructionWriter, TemplateInstructionWriter

logger = logging.getLogger(__name__)

_CALCULATORS: dict[Topology, Callable[[Any], CalculationResult]] = {
    Topology.NECKLINE: calculate_neckline_shaping,
    Topology.ARMHOLE: calculate_armhole_shaping,
    Topology.RAGLAN_TOP_DOWN: calculate_raglan_shaping,
    Topology.HAMMER_SLEEVE: calculate_hammer_sleeve_shaping,
    Topology.TRIANGULAR_SHAWL: calculate_shawl_shaping,
}


@dataclass(frozen=True)
class ComponentOutput:
    """Calculation and rendering outcome for one garment component."""

    calculation: CalculationResult
    rendering: Optional[RenderResult] = None  # None when calculation failed

    @property
    def success(self) -> bool:
        return (
            self.calculation.success
            and self.rendering is not None
            and self.rendering.success
        )


def calculate_component(
    topology: Union[Topology, str],
    data: Union[ComponentInput, Mapping[str, Any]],
) -> CalculationResult:
    """
    Dispatch *data* to the calculator for *topology*.

    Parameters
    ----------
    topology:
        ``Topology`` or its string value (e.g. ``"neckline"``).
    data:
        The topology's input record, or a mapping accepted by its
        ``from_mapping``.

    Returns
    -------
    CalculationResult
        The calculator's result; an unknown topology yields an unsuccessful
        result with ``INVALID_INPUT``.
    """
    try:
        calculator = _CALCULATORS[Topology(topology)]
    except ValueError:
        message = f"Unknown topology {topology!r}"
        logger.warning(message)
        msg = ValidationMessage(Severity.ERROR, "UNKNOWN_TOPOLOGY", message, "topology")
        return CalculationResult(
            success=False,
            error=ValidationError(ErrorCode.INVALID_INPUT, message, (msg,)),
        )
    return calculator(data)


def generate_component_instructions(
    topology: Union[Topology, str],
    data: Union[ComponentInput, Mapping[str, Any]],
    craft_type: Union[CraftType, str],
    language: Union[Language, str],
    config: Union[RenderConfig, Mapping[str, Any], None] = None,
    writer: Optional[InstructionWriter] = None,
) -> ComponentOutput:
    """
    Calculate one component's shaping and render it to instructions.

    Parameters
    ----------
    topology:
        Construction topology of the component.
    data:
        Resolved physical parameters for the topology.
    craft_type, language:
        Terminology table to render with.
    config:
        Render configuration; defaults to ``RenderConfig()``.
    writer:
        Any InstructionWriter; defaults to TemplateInstructionWriter. Pass an
        LLMInstructionWriter for polished prose.

    Returns
    -------
    ComponentOutput
        ``rendering`` is None when the calculation failed.
    """
    calculation = calculate_component(topology, data)
    if not calculation.success:
        return ComponentOutput(calculation=calculation)

    writer = writer or TemplateInstructionWriter()
    rendering = writer.write(calculation.schedule, craft_type, language, config)
    return ComponentOutput(calculation=calculation, rendering=rendering)
