"""Bounded, shape-only repair of almost-valid model output.

Models often return the right content in a slightly wrong shape: a bare
array instead of ``{"questions": [...]}``, ``mustHave`` instead of
``must_have``, a score of 105 on a 0-100 scale. The coercer fixes exactly
these shape problems in a single pass and never invents content: it does not
fill missing scalars or change string values.

Each rule is a plain function ``rule(data, schema, repairs) -> data`` that may
modify ``data`` in place and appends a short note to ``repairs`` for every
change it makes. :class:`Coercer` applies a tuple of rules in order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import copy
import logging
import types
import typing
from typing import Any

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from .types import CoercionResult

log = logging.getLogger(__name__)

type CoercionRule = Callable[[Any, type[BaseModel], list[str]], Any]
type _Visitor = Callable[[dict[str, Any], type[BaseModel], tuple[Any, ...]], None]

_SCALARS = (str, int, float, bool)


# --- Schema introspection ---


def normalize_key(key: str) -> str:
    """Fold case and drop ``_``, ``-`` and spaces: ``Must-Have`` -> ``musthave``."""
    return "".join(ch for ch in key.lower() if ch not in "_- ")


def _strip_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_list(annotation: Any) -> bool:
    return typing.get_origin(_strip_optional(annotation)) is list


def _model_type(annotation: Any) -> type[BaseModel] | None:
    """The model a field holds, directly or as list items."""
    inner = _strip_optional(annotation)
    if typing.get_origin(inner) is list:
        args = typing.get_args(inner)
        inner = _strip_optional(args[0]) if args else None
    if isinstance(inner, type) and issubclass(inner, BaseModel):
        return inner
    return None


def _constraint(field: FieldInfo, name: str) -> Any:
    for item in field.metadata:
        value = getattr(item, name, None)
        if value is not None:
            return value
    return None


def _list_fields(schema: type[BaseModel]) -> list[str]:
    return [
        name for name, field in schema.model_fields.items() if _is_list(field.annotation)
    ]


def _dotted(path: tuple[Any, ...], name: str) -> str:
    return ".".join(str(part) for part in (*path, name))


def _walk_objects(
    data: Any,
    schema: type[BaseModel],
    visit: _Visitor,
    path: tuple[Any, ...] = (),
) -> None:
    """Call ``visit`` on every dict that corresponds to a model, parents first."""
    if not isinstance(data, dict):
        return
    visit(data, schema, path)
    for name, field in schema.model_fields.items():
        nested = _model_type(field.annotation)
        if nested is None or name not in data:
            continue
        value = data[name]
        if isinstance(value, list):
            for index, item in enumerate(value):
                _walk_objects(item, nested, visit, (*path, name, index))
        else:
            _walk_objects(value, nested, visit, (*path, name))


# --- Rules ---


def wrap_bare_array(data: Any, schema: type[BaseModel], repairs: list[str]) -> Any:
    """``[...]`` -> ``{"<only list field>": [...]}``."""
    if not isinstance(data, list):
        return data
    candidates = _list_fields(schema)
    if len(candidates) != 1:
        return data
    repairs.append(f"wrapped bare array into '{candidates[0]}'")
    return {candidates[0]: data}


def unwrap_envelope(data: Any, schema: type[BaseModel], repairs: list[str]) -> Any:
    """``{"result": {...}}`` -> ``{...}`` when the key is not a schema field."""
    if not isinstance(data, dict) or len(data) != 1:
        return data
    ((key, value),) = data.items()
    if normalize_key(str(key)) in {normalize_key(name) for name in schema.model_fields}:
        return data
    if isinstance(value, dict):
        repairs.append(f"unwrapped envelope '{key}'")
        return value
    if isinstance(value, list):
        candidates = _list_fields(schema)
        if len(candidates) == 1:
            repairs.append(f"unwrapped envelope '{key}' into '{candidates[0]}'")
            return {candidates[0]: value}
    return data


def rename_near_miss_keys(
    data: Any, schema: type[BaseModel], repairs: list[str]
) -> Any:
    """Rename keys that differ from a field only in case, ``_``, ``-`` or spaces."""

    def visit(obj: dict[str, Any], model: type[BaseModel], path: tuple[Any, ...]) -> None:
        fields = model.model_fields
        by_normalized = {normalize_key(name): name for name in fields}
        for key in list(obj):
            if key in fields or not isinstance(key, str):
                continue
            target = by_normalized.get(normalize_key(key))
            if target is None or target in obj:
                continue
            obj[target] = obj.pop(key)
            repairs.append(f"renamed '{_dotted(path, key)}' to '{target}'")

    _walk_objects(data, schema, visit)
    return data


def default_missing_lists(
    data: Any, schema: type[BaseModel], repairs: list[str]
) -> Any:
    """Fill an absent required list field with ``[]`` when empty is allowed."""

    def visit(obj: dict[str, Any], model: type[BaseModel], path: tuple[Any, ...]) -> None:
        for name, field in model.model_fields.items():
            if name in obj or not field.is_required() or not _is_list(field.annotation):
                continue
            if _constraint(field, "min_length"):
                continue
            obj[name] = []
            repairs.append(f"defaulted missing '{_dotted(path, name)}' to []")

    _walk_objects(data, schema, visit)
    return data


def wrap_scalars_in_lists(
    data: Any, schema: type[BaseModel], repairs: list[str]
) -> Any:
    """``"Python"`` -> ``["Python"]`` where a list of plain values is expected."""

    def visit(obj: dict[str, Any], model: type[BaseModel], path: tuple[Any, ...]) -> None:
        for name, field in model.model_fields.items():
            if not _is_list(field.annotation) or _model_type(field.annotation):
                continue
            value = obj.get(name)
            if isinstance(value, _SCALARS):
                obj[name] = [value]
                repairs.append(f"wrapped scalar '{_dotted(path, name)}' in a list")

    _walk_objects(data, schema, visit)
    return data


def clamp_numbers(data: Any, schema: type[BaseModel], repairs: list[str]) -> Any:
    """Pull numbers outside declared ``ge``/``le`` bounds back to the bound."""

    def visit(obj: dict[str, Any], model: type[BaseModel], path: tuple[Any, ...]) -> None:
        for name, field in model.model_fields.items():
            value = obj.get(name)
            if isinstance(value, bool) or not isinstance(value, int | float):
                continue
            lower = _constraint(field, "ge")
            upper = _constraint(field, "le")
            if lower is not None and value < lower:
                obj[name] = lower
            elif upper is not None and value > upper:
                obj[name] = upper
            else:
                continue
            repairs.append(f"clamped '{_dotted(path, name)}' from {value} to {obj[name]}")

    _walk_objects(data, schema, visit)
    return data


def trim_long_lists(data: Any, schema: type[BaseModel], repairs: list[str]) -> Any:
    """Drop trailing items from lists longer than their ``max_length``."""

    def visit(obj: dict[str, Any], model: type[BaseModel], path: tuple[Any, ...]) -> None:
        for name, field in model.model_fields.items():
            value = obj.get(name)
            limit = _constraint(field, "max_length")
            if not isinstance(value, list) or limit is None or len(value) <= limit:
                continue
            obj[name] = value[:limit]
            repairs.append(
                f"trimmed '{_dotted(path, name)}' from {len(value)} to {limit} items"
            )

    _walk_objects(data, schema, visit)
    return data


DEFAULT_RULES: tuple[CoercionRule, ...] = (
    wrap_bare_array,
    unwrap_envelope,
    rename_near_miss_keys,
    default_missing_lists,
    wrap_scalars_in_lists,
    clamp_numbers,
    trim_long_lists,
)


class Coercer:
    """Applies an ordered tuple of coercion rules, once.

    The input is never modified; rules work on a deep copy.
    """

    def __init__(self, rules: Iterable[CoercionRule] = DEFAULT_RULES) -> None:
        self.rules: tuple[CoercionRule, ...] = tuple(rules)

    def coerce(self, data: Any, schema: type[BaseModel]) -> CoercionResult:
        working = copy.deepcopy(data)
        repairs: list[str] = []
        for rule in self.rules:
            working = rule(working, schema, repairs)
        if repairs:
            log.debug("Coerced %s output: %s", schema.__name__, "; ".join(repairs))
        return CoercionResult(data=working, repairs=tuple(repairs))
