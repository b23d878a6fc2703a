"""Shared helpers: YAML document IO and configuration merging."""
from __future__ import annotations

from .io import DOCUMENT_SUFFIXES, iter_document_files, read_yaml
from .merge import deep_merge, merge_lists

__all__ = [
    "DOCUMENT_SUFFIXES",
    "iter_document_files",
    "read_yaml",
    "deep_merge",
    "merge_lists",
]
