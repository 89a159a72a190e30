"""Schema-based validation of request params and tool arguments."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


def check_schema(schema: Any, subject: str = "input") -> None:
    """Check that a value is itself a valid JSON Schema.

    Args:
        schema: Candidate schema (draft 2020-12).
        subject: What the schema describes (for error messages).

    Raises:
        ValidationError: If the schema is invalid.
    """
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as e:
        raise ValidationError(f"Invalid schema for {subject}: {e.message}") from e


def validate_schema(schema: dict[str, Any], instance: Any) -> None:
    """Validate a JSON value against a JSON Schema.

    The schema is trusted; check it once with check_schema where it is
    defined. Only the first error is reported.

    Args:
        schema: JSON Schema (draft 2020-12).
        instance: Decoded JSON value to check.

    Raises:
        ValidationError: If the value does not match.
    """
    error = next(Draft202012Validator(schema).iter_errors(instance), None)
    if error is not None:
        path = ".".join(str(p) for p in error.path) if error.path else "root"
        raise ValidationError(f"Schema validation failed at '{path}': {error.message}")
