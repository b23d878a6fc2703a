"""YAML reading helpers for configuration and descriptor documents."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any

import yaml

DOCUMENT_SUFFIXES = (".yaml", ".yml", ".json")


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML (or JSON, which YAML parses) with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Args:
        path: Document path to read
        default: Value to return if file missing or invalid (default: None)
        raise_on_error: If True, propagate exceptions instead of returning default.

    Returns:
        Any: Parsed data, or default if error

    Examples:
        >>> config = read_yaml(Path("config.yaml"), default={})
        >>> assert isinstance(config, dict)
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            data = yaml.safe_load(f)
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def iter_document_files(dir_path: Path) -> list[Path]:
    """Return YAML/JSON documents in ``dir_path`` in deterministic order.

    When ``<name>.yaml`` and ``<name>.yml`` both exist only the ``.yaml`` one
    is returned.
    """
    d = Path(dir_path)
    if not d.is_dir():
        return []
    by_stem: dict[str, Path] = {}
    for suffix in reversed(DOCUMENT_SUFFIXES):
        for p in d.glob(f"*{suffix}"):
            by_stem[p.stem] = p
    return [by_stem[stem] for stem in sorted(by_stem)]


__all__ = [
    "DOCUMENT_SUFFIXES",
    "read_yaml",
    "iter_document_files",
]
