"""
LLMInstructionWriter: two-pass LLM-polished instruction writer.

Pass 1 (deterministic): render_instructions() produces the complete
instruction list with exact row numbers and stitch counts. This is the ground truth.

Pass 2 (LLM): Claude receives the rendered lines and rewords each one into
more natural pattern language via the rewrite_instructions tool. Only the
``text`` of each DetailedInstruction is replaced; steps, row numbers, counts
and metadata always come from pass 1. A rewritten line whose numbers differ
from the original is rejected.

On any failure (network error, no tool_use block, malformed output, a changed
number), write() returns the template result unchanged with a UserWarning,
so the caller always gets usable instructions. A pass-1 failure is returned as
is; the LLM is never asked to write around a broken schedule.

LLMInstructionWriter satisfies the InstructionWriter Protocol.

Requires the ``anthropic`` package (``pip install knitshape[llm]``). The
import is deferred to ``__init__`` so the rest of the module is importable
without the package installed.
"""

from __future__ import annotations

import dataclasses
import re
import warnings
from collections import Counter
from typing import Any, Mapping, Union

from knitshape.schemas.results import RenderResult
from knitshape.schemas.schedule import ShapingSchedule
from knitshape.terminology import CraftType, Language

from .config import RenderConfig
from .instructions import DetailedInstruction
from .prompts import LLM_WRITER_TOOL_SCHEMA, SYSTEM_PROMPT
from .renderer import render_instructions

_NUMBER = re.compile(r"\d+")


def numbers_in(text: str) -> Counter:
    """Multiset of the integers written in *text*."""
    return Counter(_NUMBER.findall(text))


def _build_user_content(
    instructions: tuple[DetailedInstruction, ...], craft: CraftType, language: Language
) -> str:
    lines = [f"Craft: {craft.value}. Language: {language.value}.", ""]
    lines.extend(f"{i.step}. {i.text}" for i in instructions)
    return "\n".join(lines)


def _merge(
    instructions: tuple[DetailedInstruction, ...], raw_lines: Mapping[str, str]
) -> tuple[DetailedInstruction, ...]:
    """Apply rewritten texts; raise ValueError if any rewrite changes a number."""
    merged = []
    for instruction in instructions:
        # Fall back to template text for any step the LLM omitted.
        text = raw_lines.get(str(instruction.step), instruction.text)
        if not isinstance(text, str) or not text.strip():
            raise ValueError(f"step {instruction.step}: empty rewrite")
        if numbers_in(text) != numbers_in(instruction.text):
            raise ValueError(f"step {instruction.step}: rewrite changed the numbers")
        merged.append(dataclasses.replace(instruction, text=text.strip()))
    return tuple(merged)


class LLMInstructionWriter:
    """
    Two-pass LLM-polished instruction writer.

    Satisfies the InstructionWriter Protocol: takes the same arguments as
    render_instructions() and returns a RenderResult.

    The Anthropic client reads ``ANTHROPIC_API_KEY`` from the environment.
    """

    def __init__(
        self,
        model: str = "claude-haiku-4-5-20251001",
        max_tokens: int = 4096,
    ) -> None:
        try:
            import anthropic

            self._client = anthropic.Anthropic()
        except ImportError as exc:
            raise ImportError(
                "Install the LLM extras for writer support: pip install knitshape[llm]"
            ) from exc
        self._model = model
        self._max_tokens = max_tokens

    def write(
        self,
        schedule: ShapingSchedule,
        craft_type: Union[CraftType, str],
        language: Union[Language, str],
        config: Union[RenderConfig, Mapping[str, Any], None] = None,
    ) -> RenderResult:
        """
        Render, then reword every instruction line.

        Falls back to the template result with a UserWarning on any LLM failure.
        """
        template_out = render_instructions(schedule, craft_type, language, config)
        if not template_out.success or not template_out.instructions:
            return template_out

        user_content = _build_user_content(
            template_out.instructions, CraftType(craft_type), Language(language)
        )
        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=SYSTEM_PROMPT,
                tools=[LLM_WRITER_TOOL_SCHEMA],
                tool_choice={"type": "any"},
                messages=[{"role": "user", "content": user_content}],
            )
            tool_block = next((b for b in response.content if b.type == "tool_use"), None)
            if tool_block is None:
                return template_out

            raw_lines: dict[str, str] = tool_block.input["lines"]
            instructions = _merge(template_out.instructions, raw_lines)
            return dataclasses.replace(template_out, instructions=instructions)
        except Exception as exc:  # noqa: BLE001
            warnings.warn(
                f"LLMInstructionWriter failed, returning template instructions: {exc}",
                stacklevel=2,
            )
            return template_out
