"""App, extension and extension point descriptors plus their ordering."""
from __future__ import annotations

from .models import AppDescriptor, Extension, ExtensionPoint
from .ordering import Orderable, SortDirection, sort_by_order

__all__ = [
    "AppDescriptor",
    "Extension",
    "ExtensionPoint",
    "Orderable",
    "SortDirection",
    "sort_by_order",
]
