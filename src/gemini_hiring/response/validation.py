"""
Validate raw model output against an operation's output schema
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from gemini_hiring.exceptions import OutputValidationError

from .coercion import Coercer
from .issues import issues_from_error
from .parsing import extract_json
from .types import TModel, ValidationOutcome

log = logging.getLogger(__name__)

_DEFAULT_COERCER = Coercer()


def validate_response(
    raw_text: str,
    output_schema: type[TModel],
    coercer: Coercer | None = None,
) -> ValidationOutcome[TModel]:
    """Parse and validate model output, coercing once if needed.

    Args:
        raw_text: The model's text output.
        output_schema: Pydantic model the output must satisfy.
        coercer: Coercion rules to apply on first failure. Defaults to the
            standard rule set.

    Returns:
        A ``ValidationOutcome`` whose ``data`` is an ``output_schema``
        instance. ``coercion_applied`` is true only when the first
        validation failed and the coerced data passed.

    Raises:
        OutputValidationError: If no JSON could be found, or the data is
            still invalid after the coercion pass.
    """
    parsed = extract_json(raw_text)
    if not parsed.success:
        issues = [
            {"loc": [], "msg": msg, "type": "json_invalid"} for msg in parsed.errors
        ]
        raise OutputValidationError(
            f"Model output for {output_schema.__name__} contained no JSON",
            issues=issues,
            final_issues=issues,
            schema=output_schema.__name__,
        )

    try:
        data = output_schema.model_validate(parsed.parsed_data)
        return ValidationOutcome(data=data, parse_method=parsed.method)
    except ValidationError as e:
        issues = issues_from_error(e)

    log.debug(
        "%s failed first validation with %d issue(s); attempting coercion",
        output_schema.__name__,
        len(issues),
    )
    coerced = (coercer or _DEFAULT_COERCER).coerce(parsed.parsed_data, output_schema)
    if not coerced.changed:
        raise OutputValidationError(
            f"Model output failed {output_schema.__name__} validation "
            f"({len(issues)} issue(s), no coercion applicable)",
            issues=issues,
            final_issues=issues,
            schema=output_schema.__name__,
        )

    try:
        data = output_schema.model_validate(coerced.data)
    except ValidationError as e:
        final_issues = issues_from_error(e)
        raise OutputValidationError(
            f"Model output failed {output_schema.__name__} validation after "
            f"coercion ({len(final_issues)} issue(s) remain)",
            issues=issues,
            final_issues=final_issues,
            schema=output_schema.__name__,
            repairs=list(coerced.repairs),
        ) from e

    return ValidationOutcome(
        data=data,
        coercion_applied=True,
        repairs=coerced.repairs,
        parse_method=parsed.method,
    )

