"""Descriptor schema validation.

App and extension documents are validated with JSON Schema. Schemas are
stored as YAML files under ``appframework.data/schemas`` and loaded in a
single, consistent way.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Mapping

from jsonschema import Draft202012Validator

from appframework.core.exceptions import ConfigurationError
from appframework.core.utils.io import read_yaml
from appframework.data import get_data_path


@lru_cache(maxsize=16)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.schema.yaml`` if no extension is present.

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    if not schema_name.endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.schema.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


@lru_cache(maxsize=16)
def _validator(schema_name: str) -> Draft202012Validator:
    return Draft202012Validator(load_schema(schema_name))


def validation_errors(payload: Mapping[str, Any], schema_name: str) -> List[str]:
    """Return readable validation errors for ``payload`` (empty if valid)."""
    errors: List[str] = []
    for error in sorted(_validator(schema_name).iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(
    payload: Mapping[str, Any],
    schema_name: str,
    *,
    source: str | None = None,
) -> None:
    """Validate a descriptor payload against a bundled schema.

    Raises:
        ConfigurationError: If validation fails.
    """
    errors = validation_errors(payload, schema_name)
    if errors:
        ident = payload.get("id") if isinstance(payload, Mapping) else None
        label = f"{schema_name} descriptor '{ident}'" if ident else f"{schema_name} descriptor"
        raise ConfigurationError(
            f"Invalid {label}: {'; '.join(errors)}",
            context={"schema": schema_name, "id": ident, "source": source, "errors": errors},
        )


__all__ = [
    "load_schema",
    "validate_payload",
    "validation_errors",
]
