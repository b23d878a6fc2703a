from __future__ import annotations

from .validation import load_schema, validate_payload, validation_errors

__all__ = ["load_schema", "validate_payload", "validation_errors"]
