"""Feature toggles.

A toggle expression is either empty (always on), a toggle name (on when the
name is active) or a name prefixed with ``!`` (on when the name is NOT
active). Active names come from a YAML toggle file such as::

    toggles:
      newPatientHeader: true
      legacyRegistration: false

A flat mapping without the ``toggles`` key is accepted too.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import AbstractSet, Any, FrozenSet, Mapping, Optional

from appframework.core.utils.io import read_yaml

logger = logging.getLogger(__name__)

NEGATION_PREFIX = "!"


def is_toggle_on(toggle_expression: Optional[str], active_toggle_names: AbstractSet[str]) -> bool:
    """Return True if the (possibly negated) toggle expression is on.

    Unknown names are simply inactive, so this never raises.
    """
    expr = (toggle_expression or "").strip()
    if not expr:
        return True
    if expr.startswith(NEGATION_PREFIX):
        return expr[len(NEGATION_PREFIX):].strip() not in active_toggle_names
    return expr in active_toggle_names


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "on", "yes", "1", "enabled"}
    return bool(value)


def active_names_from_mapping(data: Mapping[str, Any]) -> FrozenSet[str]:
    """Extract the active toggle names from a parsed toggle document."""
    toggles = data.get("toggles", data) if isinstance(data, Mapping) else {}
    if not isinstance(toggles, Mapping):
        return frozenset()
    return frozenset(str(name).strip() for name, value in toggles.items() if _truthy(value))


class FeatureToggles:
    """Toggle source backed by a YAML file.

    The file is re-read whenever its modification time changes, so editing
    it takes effect without restarting. A missing file means no toggle is
    active.
    """

    def __init__(self, toggles_file: Optional[Path] = None) -> None:
        self._file: Optional[Path] = Path(toggles_file) if toggles_file else None
        self._mtime: Optional[float] = None
        self._active: FrozenSet[str] = frozenset()

    @property
    def toggles_file(self) -> Optional[Path]:
        return self._file

    def set_toggles_file(self, toggles_file: Optional[Path]) -> None:
        self._file = Path(toggles_file) if toggles_file else None
        self._mtime = None
        self._active = frozenset()

    def _refresh(self) -> None:
        if self._file is None:
            return
        try:
            mtime = self._file.stat().st_mtime
        except FileNotFoundError:
            if self._active:
                logger.debug("Toggle file %s removed; no toggles active", self._file)
            self._mtime = None
            self._active = frozenset()
            return
        if mtime == self._mtime:
            return
        data = read_yaml(self._file, default=None)
        if data is None:
            logger.warning("Feature toggle file %s is empty or unreadable; no toggles active", self._file)
            data = {}
        elif not isinstance(data, Mapping):
            logger.warning("Feature toggle file %s must contain a mapping; ignoring it", self._file)
            data = {}
        self._active = active_names_from_mapping(data)
        self._mtime = mtime
        logger.debug("Loaded %d active feature toggles from %s", len(self._active), self._file)

    def active_toggle_names(self) -> FrozenSet[str]:
        """Names of the toggles currently switched on."""
        self._refresh()
        return self._active

    def is_toggle_on(self, toggle_expression: Optional[str]) -> bool:
        return is_toggle_on(toggle_expression, self.active_toggle_names())


class StaticToggles:
    """Toggle source over a fixed set of active names."""

    def __init__(self, active: AbstractSet[str] = frozenset()) -> None:
        self._active = frozenset(active)

    def active_toggle_names(self) -> FrozenSet[str]:
        return self._active

    def is_toggle_on(self, toggle_expression: Optional[str]) -> bool:
        return is_toggle_on(toggle_expression, self._active)


__all__ = [
    "NEGATION_PREFIX",
    "is_toggle_on",
    "active_names_from_mapping",
    "FeatureToggles",
    "StaticToggles",
]
