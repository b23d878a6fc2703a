"""
Collaborators consumed by the resolution engine.

The engine only talks to these narrow protocols; in-memory implementations
are provided for configuration-driven deployments and for tests.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Any, Dict, Iterable, List, Literal, Mapping, Optional, Protocol, Sequence, Set, Tuple

from appframework.core.domain.models import AppDescriptor, Extension
from appframework.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ComponentKind = Literal["app", "extension"]


@dataclass
class Location:
    """A location a user may log in to."""

    id: Optional[int] = None
    uuid: str = ""
    name: str = ""
    tags: List[Mapping[str, Any]] = field(default_factory=list)


class DescriptorStore(Protocol):
    def list_apps(self) -> Sequence[AppDescriptor]: ...

    def list_free_standing_extensions(self) -> Sequence[Extension]: ...


class ToggleSource(Protocol):
    def active_toggle_names(self) -> AbstractSet[str]: ...


class ComponentStateStore(Protocol):
    def is_enabled(self, component_id: str, kind: ComponentKind) -> bool: ...


class LoginLocationStore(Protocol):
    def login_locations(self) -> Sequence[Location]: ...


class LoginLocationFilter(Protocol):
    def accept(self, location: Location) -> bool: ...


class InMemoryDescriptorStore:
    """App descriptors and free-standing extensions held in insertion order.

    Ids are unique per collection; adding a duplicate raises
    ``ConfigurationError``.
    """

    def __init__(
        self,
        apps: Iterable[AppDescriptor] = (),
        extensions: Iterable[Extension] = (),
    ) -> None:
        self._apps: Dict[str, AppDescriptor] = {}
        self._extensions: Dict[str, Extension] = {}
        self.add_apps(apps)
        self.add_extensions(extensions)

    def add_apps(self, apps: Iterable[AppDescriptor]) -> None:
        for app in apps:
            if app.id in self._apps:
                raise ConfigurationError(
                    f"Duplicate app id '{app.id}'", context={"kind": "app", "id": app.id}
                )
            self._apps[app.id] = app

    def add_extensions(self, extensions: Iterable[Extension]) -> None:
        for ext in extensions:
            if ext.id in self._extensions:
                raise ConfigurationError(
                    f"Duplicate extension id '{ext.id}'", context={"kind": "extension", "id": ext.id}
                )
            self._extensions[ext.id] = ext

    def clear(self) -> None:
        self._apps.clear()
        self._extensions.clear()

    def list_apps(self) -> List[AppDescriptor]:
        return list(self._apps.values())

    def list_free_standing_extensions(self) -> List[Extension]:
        return list(self._extensions.values())


class InMemoryComponentState:
    """Administrative on/off switch per component; unknown components are on."""

    def __init__(self) -> None:
        self._disabled: Set[Tuple[str, str]] = set()

    def set_enabled(self, component_id: str, kind: ComponentKind, enabled: bool) -> None:
        key = (kind, component_id)
        if enabled:
            self._disabled.discard(key)
        else:
            self._disabled.add(key)
        logger.debug("Component %s %s %s", kind, component_id, "enabled" if enabled else "disabled")

    def enable(self, component_id: str, kind: ComponentKind) -> None:
        self.set_enabled(component_id, kind, True)

    def disable(self, component_id: str, kind: ComponentKind) -> None:
        self.set_enabled(component_id, kind, False)

    def is_enabled(self, component_id: str, kind: ComponentKind) -> bool:
        return (kind, component_id) not in self._disabled


class InMemoryLoginLocations:
    """Login locations kept in insertion order."""

    def __init__(self, locations: Iterable[Location] = ()) -> None:
        self._locations: List[Location] = list(locations)

    def add(self, location: Location) -> None:
        self._locations.append(location)

    def login_locations(self) -> List[Location]:
        return list(self._locations)


class AcceptAllLocations:
    """Login location filter letting every location through."""

    def accept(self, location: Location) -> bool:
        return True


__all__ = [
    "ComponentKind",
    "Location",
    "DescriptorStore",
    "ToggleSource",
    "ComponentStateStore",
    "LoginLocationStore",
    "LoginLocationFilter",
    "InMemoryDescriptorStore",
    "InMemoryComponentState",
    "InMemoryLoginLocations",
    "AcceptAllLocations",
]
