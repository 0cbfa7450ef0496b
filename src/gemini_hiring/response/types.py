"""
Result containers for response parsing, coercion and validation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

TModel = TypeVar("TModel", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class ParsingResult:
    """Outcome of pulling a JSON value out of raw model text"""

    success: bool
    parsed_data: Any = None
    method: str = "none"  # whole_text | code_block | scan
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CoercionResult:
    """Data after one coercion pass, with a note per repair made"""

    data: Any
    repairs: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.repairs)


@dataclass(frozen=True, slots=True)
class ValidationOutcome(Generic[TModel]):
    """A schema-valid model instance and how it was obtained"""

    data: TModel
    coercion_applied: bool = False
    repairs: tuple[str, ...] = field(default=())
    parse_method: str = "whole_text"
