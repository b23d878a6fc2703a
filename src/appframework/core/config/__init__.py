"""Configuration: layered YAML loading and per-section accessors."""
from __future__ import annotations

from .manager import ENV_PREFIX, HOME_ENV, ConfigManager
from .base import BaseDomainConfig
from .domains import (
    DescriptorsConfig,
    FeaturesConfig,
    RequireConfig,
    ResolutionConfig,
)

__all__ = [
    "ENV_PREFIX",
    "HOME_ENV",
    "ConfigManager",
    "BaseDomainConfig",
    "DescriptorsConfig",
    "FeaturesConfig",
    "RequireConfig",
    "ResolutionConfig",
]
