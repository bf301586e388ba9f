"""Structural validation of model output against the report schema."""

from typing import Any

from pydantic import BaseModel, ValidationError

from impactlens.core.errors import SchemaMismatchError
from impactlens.schemas.report import AntiPortfolioData


def _format_validation_error(error: ValidationError, schema_class: type[BaseModel]) -> str:
    """
    Format validation error as a field-by-field description.

    Args:
        error: Pydantic ValidationError
        schema_class: The schema class that failed validation

    Returns:
        Formatted error message
    """
    errors = error.errors()
    if not errors:
        return str(error)

    error_parts = [f"Schema mismatch: response does not match {schema_class.__name__} ({len(errors)} problem(s))"]

    for err in errors:
        loc = " -> ".join(str(x) for x in err["loc"]) or "(root)"
        error_type = err["type"]
        input_value = err.get("input")

        if error_type == "missing":
            error_parts.append(f"- {loc}: required field is missing")
            continue

        line = f"- {loc}: {err.get('msg', '')}"
        if input_value is not None and not isinstance(input_value, (dict, list)):
            input_str = str(input_value)
            if len(input_str) > 60:
                input_str = input_str[:57] + "..."
            line += f" (got {input_str!r})"
        elif isinstance(input_value, (dict, list)):
            line += f" (got {type(input_value).__name__})"
        error_parts.append(line)

    return "\n".join(error_parts)


def validate_report(data: Any) -> AntiPortfolioData:
    """
    Validate parsed JSON against the full report schema.

    Args:
        data: Parsed JSON value

    Returns:
        Validated AntiPortfolioData instance

    Raises:
        SchemaMismatchError: If any required field is missing or has the wrong shape
    """
    try:
        return AntiPortfolioData.model_validate(data)
    except ValidationError as e:
        raise SchemaMismatchError(_format_validation_error(e, AntiPortfolioData)) from e
