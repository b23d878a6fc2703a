"""App and extension resolution."""
from __future__ import annotations

from .engine import ResolutionEngine
from .factory import create_engine

__all__ = ["ResolutionEngine", "create_engine"]
