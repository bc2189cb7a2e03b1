"""Shared schema validation utilities.

refit validates its YAML configuration and rewrite rule sets using JSON
Schema. Schemas are stored as YAML files under ``refit.data/schemas/`` and
loaded in a single, consistent way across the codebase.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from refit.core.utils.io import read_yaml
from refit.data import get_data_path


class SchemaValidationError(ValueError):
    """Raised when schema validation fails."""

    def __init__(self, message: str, errors: List[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.schema.yaml`` when ``schema_name`` has no
    extension (``"rules"`` -> ``rules.schema.yaml``).

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.schema.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload_safe(payload: Any, schema_name: str) -> List[str]:
    """Validate a payload and return list of error messages (empty if valid)."""
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)

    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        SchemaValidationError: If validation fails; ``errors`` lists every
            violation as ``"<path>: <message>"``.
        FileNotFoundError: If schema doesn't exist.
    """
    errors = validate_payload_safe(payload, schema_name)
    if errors:
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': {errors[0]}",
            errors,
        )


__all__ = [
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
    "SchemaValidationError",
]
