"""Response parsing, coercion and validation."""

from .coercion import DEFAULT_RULES, Coercer, CoercionRule
from .parsing import extract_json
from .types import CoercionResult, ParsingResult, ValidationOutcome
from .validation import validate_response

__all__ = [
    "DEFAULT_RULES",
    "CoercionResult",
    "CoercionRule",
    "Coercer",
    "ParsingResult",
    "ValidationOutcome",
    "extract_json",
    "validate_response",
]
