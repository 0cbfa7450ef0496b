"""Render an operation's prompt from its validated input.

This is a pure function of ``(descriptor, validated_input)``: no I/O beyond
loading the packaged templates, no provider calls. Every value reaching the
template passes through :func:`~gemini_hiring.prompts.sanitize.finalize_value`.
"""

from __future__ import annotations

import dataclasses
from functools import lru_cache
import logging
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError
from pydantic import BaseModel

from gemini_hiring.constants import AI_DISCLAIMER
from gemini_hiring.exceptions import TemplateRenderError
from gemini_hiring.types import RenderedPrompt

from .sanitize import finalize_value
from .transcript import truncate_transcript

if TYPE_CHECKING:
    from gemini_hiring.registry import OperationDescriptor

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class PromptTemplate:
    """Names of the system and user templates for one operation."""

    system: str
    user: str


def _thousands(value: float) -> str:
    return f"{value:,.0f}"


@lru_cache(maxsize=1)
def prompt_environment() -> Environment:
    """Shared Jinja environment for all packaged prompt templates."""
    env = Environment(  # noqa: S701
        loader=PackageLoader("gemini_hiring", "prompts/templates"),
        undefined=StrictUndefined,
        finalize=finalize_value,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )
    env.filters["thousands"] = _thousands
    env.filters["truncate_transcript"] = truncate_transcript
    env.globals["disclaimer"] = AI_DISCLAIMER
    return env


def render_template(name: str, context: dict[str, Any]) -> str:
    """Render one packaged template, translating Jinja failures.

    Raises:
        TemplateRenderError: If the template is missing, malformed, or
            references a variable the context does not provide.
    """
    try:
        template = prompt_environment().get_template(name)
        return template.render(**context).strip()
    except TemplateError as e:
        raise TemplateRenderError(
            f"Failed to render prompt template '{name}': {e}",
            template=name,
        ) from e


def build_prompt(
    descriptor: OperationDescriptor, validated_input: BaseModel
) -> RenderedPrompt:
    """Build the prompt for one operation.

    Args:
        descriptor: The operation being invoked.
        validated_input: An instance of ``descriptor.input_schema``.

    Returns:
        The rendered system instruction and user text.

    Raises:
        TemplateRenderError: If the input is not of the descriptor's input
            schema, or the template cannot be rendered with it.
    """
    if not isinstance(validated_input, descriptor.input_schema):
        raise TemplateRenderError(
            f"Operation '{descriptor.name}' expects "
            f"{descriptor.input_schema.__name__}, got {type(validated_input).__name__}",
            operation=descriptor.name,
        )

    context = validated_input.model_dump()
    system = render_template(descriptor.prompt_template.system, context)
    text = render_template(descriptor.prompt_template.user, context)
    log.debug(
        "Built prompt for %s (system=%d chars, user=%d chars)",
        descriptor.name,
        len(system),
        len(text),
    )
    return RenderedPrompt(system=system, text=text)
