from __future__ import annotations

from .toggles import (
    NEGATION_PREFIX,
    FeatureToggles,
    StaticToggles,
    active_names_from_mapping,
    is_toggle_on,
)

__all__ = [
    "NEGATION_PREFIX",
    "FeatureToggles",
    "StaticToggles",
    "active_names_from_mapping",
    "is_toggle_on",
]
