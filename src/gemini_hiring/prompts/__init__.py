"""Prompt rendering for the generation operations."""

from .builder import PromptTemplate, build_prompt, prompt_environment, render_template
from .sanitize import sanitize_text, strip_control_chars
from .transcript import estimate_tokens, truncate_transcript

__all__ = [
    "PromptTemplate",
    "build_prompt",
    "estimate_tokens",
    "prompt_environment",
    "render_template",
    "sanitize_text",
    "strip_control_chars",
    "truncate_transcript",
]
