"""
App framework configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from appframework.core.exceptions import ConfigurationError
from appframework.core.utils.io import iter_document_files, read_yaml
from appframework.core.utils.merge import deep_merge
from appframework.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "APPFRAMEWORK_"
HOME_ENV = "APPFRAMEWORK_HOME"


class ConfigManager:
    """Load and merge app framework configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: APPFRAMEWORK_<section>__<key>[__<key>...]
    2. Project config: <home>/config/*.yaml (alphabetical order)
    3. Bundled defaults: appframework.data/config/*.yaml (alphabetical order)

    ``home`` defaults to ``$APPFRAMEWORK_HOME`` when set, otherwise to the
    current working directory. Relative paths found in the configuration
    (toggle file, descriptor directories) resolve against it.
    """

    def __init__(self, home: Optional[Path] = None) -> None:
        if home is None:
            env_home = os.environ.get(HOME_ENV)
            home = Path(env_home) if env_home else Path.cwd()
        self.home = Path(home).expanduser().resolve()
        self.project_config_dir = self.home / "config"
        self.core_config_dir = get_data_path("config")

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except Exception as exc:
            raise ConfigurationError(
                f"Cannot read config file {path}: {exc}", context={"path": str(path)}
            ) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping: {path}", context={"path": str(path)}
            )
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_document_files(directory):
            if path.suffix == ".json":
                continue
            logger.debug("Loading config layer %s", path)
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            # Only "section__key" shaped names are overrides (APPFRAMEWORK_HOME is not).
            if "__" not in raw:
                continue
            segs = raw.split("__")
            if any(seg == "" for seg in segs):
                raise ConfigurationError(
                    f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                    context={"key": key},
                )
            yield [seg.lower() for seg in segs], self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self._iter_env_overrides():
            logger.debug("Environment override %s", ".".join(path))
            self._set_nested(cfg, path, value)

    # ========== Public API ==========

    def load_config(self) -> Dict[str, Any]:
        """Return the fully merged configuration.

        Merge order:
            1. Bundled defaults
            2. Project config directory
            3. Environment variable overrides
        """
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        self.apply_env_overrides(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key (``"resolution.order"``) in the merged config."""
        cur: Any = self.load_config()
        for part in key.split("."):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur

    def resolve_path(self, value: str | Path) -> Path:
        """Resolve a configured path relative to the home directory."""
        p = Path(value).expanduser()
        return p if p.is_absolute() else self.home / p


__all__ = ["ConfigManager", "ENV_PREFIX", "HOME_ENV"]
