"""
Data models for app and extension descriptors.

This module defines the descriptors the resolution engine works on:
- ExtensionPoint: A named slot declared by an app
- Extension: A fragment plugged into an extension point
- AppDescriptor: A top-level app shown in the shell's app list
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ExtensionPoint:
    """A named slot that collects the extensions targeting it."""

    id: str
    description: Optional[str] = None


@dataclass(eq=False)
class Extension:
    """A pluggable fragment attached to a named extension point.

    Attributes:
        id: Unique extension identifier
        app_id: Owning app id, or "" for free-standing extensions
        extension_point_id: Extension point this extension plugs into
        type: Presentation type (link, script, fragment...)
        label: Display label
        url: Target url
        order: Sort key, higher values come first
        icon: Optional icon url
        feature_toggle: Optional toggle name, "!" prefix negates it
        require: Optional require expression gating visibility
        extension_params: Free-form parameters passed to the renderer
    """

    id: str = ""
    app_id: str = ""
    extension_point_id: str = ""
    type: str = "link"
    label: Optional[str] = None
    url: Optional[str] = None
    order: int = 0
    icon: Optional[str] = None
    feature_toggle: Optional[str] = None
    require: Optional[str] = None
    extension_params: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class AppDescriptor:
    """A top-level addressable module shown in the shell's app list.

    Attributes:
        id: Unique app identifier
        description: Human-readable description
        label: Display label
        url: Entry url
        icon: Icon url
        tiny_icon: Small icon url
        order: Sort key, higher values come first
        feature_toggle: Optional toggle name, "!" prefix negates it
        extension_points: Extension points declared by the app
        extensions: Extensions attached directly to the app
        require: Optional require expression gating visibility
        config: Free-form app configuration
    """

    id: str
    description: Optional[str] = None
    label: Optional[str] = None
    url: Optional[str] = None
    icon: Optional[str] = None
    tiny_icon: Optional[str] = None
    order: int = 0
    feature_toggle: Optional[str] = None
    extension_points: List[ExtensionPoint] = field(default_factory=list)
    extensions: List[Extension] = field(default_factory=list)
    require: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)

    def declares(self, extension_point_id: str) -> bool:
        """Return True if the app declares the given extension point."""
        return any(p.id == extension_point_id for p in self.extension_points)


__all__ = [
    "AppDescriptor",
    "Extension",
    "ExtensionPoint",
]
