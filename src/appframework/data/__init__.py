"""
Bundled data resources.

Provides access to the default configuration and the descriptor schemas
shipped inside the package, using importlib.resources.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a bundled data file or directory.

    Args:
        subpackage: Name of the data subpackage (e.g., "config", "schemas")
        filename: Optional filename within the subpackage

    Example:
        >>> get_data_path("config", "defaults.yaml")
        PosixPath('/path/to/appframework/data/config/defaults.yaml')
    """
    pkg = resources.files("appframework.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
