"""Base class for domain-specific configuration accessors.

Provides a standardized pattern for all domain configs with:
- One merged config load per accessor
- Consistent home directory handling
- Type-checked section access
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Collection, Dict, Mapping, Optional

from appframework.core.exceptions import ConfigurationError

from .manager import ConfigManager


class BaseDomainConfig(ABC):
    """Abstract base class for domain-specific configuration accessors.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "mySection"

            @cached_property
            def my_setting(self) -> str:
                return self.section.get("mySetting", "default")
    """

    def __init__(
        self,
        home: Optional[Path] = None,
        *,
        config: Optional[Mapping[str, Any]] = None,
        manager: Optional[ConfigManager] = None,
    ) -> None:
        """Initialize domain config.

        Args:
            home: Home directory used to locate project config.
            config: Pre-loaded merged config; skips loading when given.
            manager: Existing ConfigManager to share between accessors.
        """
        self._mgr = manager or ConfigManager(home=home)
        self._config: Dict[str, Any] = dict(config) if config is not None else self._mgr.load_config()

    @property
    def home(self) -> Path:
        return self._mgr.home

    @property
    def manager(self) -> ConfigManager:
        return self._mgr

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """This domain's configuration section, or an empty dict."""
        section = self._config.get(self._config_section(), {}) or {}
        return section if isinstance(section, dict) else {}

    def _choice(self, key: str, allowed: Collection[str], default: str) -> str:
        value = str(self.section.get(key, default)).strip().lower()
        if value not in allowed:
            raise ConfigurationError(
                f"{self._config_section()}.{key} must be one of {sorted(allowed)}, got '{value}'",
                context={"key": f"{self._config_section()}.{key}", "value": value},
            )
        return value

    def _int(self, key: str, default: int, *, minimum: int = 0, maximum: Optional[int] = None) -> int:
        raw = self.section.get(key, default)
        try:
            value = int(raw)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"{self._config_section()}.{key} must be an integer, got {raw!r}",
                context={"key": f"{self._config_section()}.{key}", "value": raw},
            ) from exc
        if value < minimum:
            raise ConfigurationError(
                f"{self._config_section()}.{key} must be >= {minimum}, got {value}",
                context={"key": f"{self._config_section()}.{key}", "value": value},
            )
        if maximum is not None and value > maximum:
            raise ConfigurationError(
                f"{self._config_section()}.{key} must be <= {maximum}, got {value}",
                context={"key": f"{self._config_section()}.{key}", "value": value},
            )
        return value


__all__ = ["BaseDomainConfig"]
