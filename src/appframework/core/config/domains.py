"""Typed accessors for each configuration section."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import List

from appframework.core.domain.ordering import SortDirection
from appframework.core.require.parser import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT

from .base import BaseDomainConfig

ORDER_DIRECTIONS = ("descending", "ascending")
PRECEDENCE_MODES = ("left-to-right", "standard")


class ResolutionConfig(BaseDomainConfig):
    """``resolution`` section: sorting and app/extension toggle inheritance."""

    def _config_section(self) -> str:
        return "resolution"

    @cached_property
    def order(self) -> SortDirection:
        return self._choice("order", ORDER_DIRECTIONS, "descending")  # type: ignore[return-value]

    @cached_property
    def inherit_app_toggle(self) -> bool:
        return bool(self.section.get("inherit_app_toggle", True))


class RequireConfig(BaseDomainConfig):
    """``require`` section: expression grammar settings."""

    def _config_section(self) -> str:
        return "require"

    @cached_property
    def precedence(self) -> str:
        return self._choice("precedence", PRECEDENCE_MODES, "left-to-right")

    @cached_property
    def max_depth(self) -> int:
        return self._int("max_depth", DEFAULT_MAX_DEPTH, minimum=1, maximum=MAX_DEPTH_LIMIT)


class FeaturesConfig(BaseDomainConfig):
    """``features`` section: where feature toggles are read from."""

    def _config_section(self) -> str:
        return "features"

    @cached_property
    def toggles_file(self) -> Path:
        return self.manager.resolve_path(self.section.get("toggles_file") or "feature_toggles.yaml")


class DescriptorsConfig(BaseDomainConfig):
    """``descriptors`` section: directories holding app/extension documents."""

    def _config_section(self) -> str:
        return "descriptors"

    @cached_property
    def paths(self) -> List[Path]:
        raw = self.section.get("paths") or []
        if isinstance(raw, str):
            raw = [raw]
        return [self.manager.resolve_path(str(p)) for p in raw if str(p).strip()]


__all__ = [
    "ORDER_DIRECTIONS",
    "PRECEDENCE_MODES",
    "ResolutionConfig",
    "RequireConfig",
    "FeaturesConfig",
    "DescriptorsConfig",
]
