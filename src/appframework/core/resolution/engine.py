"""
Resolution engine: which apps and extensions a session gets to see.

Every view is computed the same way:
1. pull descriptors from the descriptor store
2. drop components whose feature toggle (or administrative state) is off
3. drop extensions whose require expression is false for the context
4. sort by order

The engine keeps no per-call state, so one instance can serve concurrent
requests as long as its stores tolerate concurrent reads.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, Any, Iterable, List, Mapping, Optional, Sequence

from appframework.core.domain.models import AppDescriptor, Extension
from appframework.core.domain.ordering import SortDirection, sort_by_order
from appframework.core.features.toggles import is_toggle_on
from appframework.core.require.evaluator import ExpressionEvaluator
from appframework.core.stores import (
    ComponentStateStore,
    DescriptorStore,
    InMemoryComponentState,
    Location,
    LoginLocationFilter,
    LoginLocationStore,
    ToggleSource,
)

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Sort, toggle-filter and require-filter apps and extensions.

    Features:
    - Stable ordering by the ``order`` field (direction configurable)
    - Feature toggles, including ``!``-negated toggles
    - Optional administrative on/off state per component
    - Require expressions evaluated against a per-request context
    - Login locations passed through injected filter capabilities
    """

    def __init__(
        self,
        descriptors: DescriptorStore,
        toggles: ToggleSource,
        *,
        evaluator: Optional[ExpressionEvaluator] = None,
        component_state: Optional[ComponentStateStore] = None,
        login_locations: Optional[LoginLocationStore] = None,
        login_location_filters: Iterable[LoginLocationFilter] = (),
        order: SortDirection = "descending",
        inherit_app_toggle: bool = True,
    ) -> None:
        """
        Initialize the engine with its collaborators.

        Args:
            descriptors: Source of apps and free-standing extensions
            toggles: Source of the active feature toggle names
            evaluator: Require-expression evaluator (default settings if None)
            component_state: Administrative on/off state (all on if None)
            login_locations: Source of login locations
            login_location_filters: Capabilities that must all accept a location
            order: "descending" (higher order first) or "ascending"
            inherit_app_toggle: Hide app-attached extensions of disabled apps
        """
        self.descriptors = descriptors
        self.toggles = toggles
        self.evaluator = evaluator or ExpressionEvaluator()
        self.component_state = component_state or InMemoryComponentState()
        self.login_locations = login_locations
        self.login_location_filters: List[LoginLocationFilter] = list(login_location_filters)
        self.order = order
        self.inherit_app_toggle = inherit_app_toggle

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _active_toggles(self) -> AbstractSet[str]:
        # One snapshot per call so every filter decision sees the same set.
        return frozenset(self.toggles.active_toggle_names())

    def _sort(self, items: Iterable[Any]) -> List[Any]:
        return sort_by_order(items, self.order)

    def _is_app_enabled(self, app: AppDescriptor, active: AbstractSet[str]) -> bool:
        if not is_toggle_on(app.feature_toggle, active):
            logger.debug("App %s hidden by feature toggle %r", app.id, app.feature_toggle)
            return False
        if not self.component_state.is_enabled(app.id, "app"):
            logger.debug("App %s disabled", app.id)
            return False
        return True

    def _is_extension_enabled(self, extension: Extension, active: AbstractSet[str]) -> bool:
        if not is_toggle_on(extension.feature_toggle, active):
            logger.debug("Extension %s hidden by feature toggle %r", extension.id, extension.feature_toggle)
            return False
        if not self.component_state.is_enabled(extension.id, "extension"):
            logger.debug("Extension %s disabled", extension.id)
            return False
        return True

    def _collect_extensions(
        self,
        extension_point_id: Optional[str],
        active: Optional[AbstractSet[str]] = None,
    ) -> List[Extension]:
        """App-attached then free-standing extensions for the point, each id once.

        When ``active`` is given and app toggles are inherited, extensions of
        disabled apps are skipped before de-duplication, so an extension that
        is also registered free-standing still comes through that way.
        """
        seen: set[str] = set()
        collected: List[Extension] = []

        def take(candidates: Sequence[Extension]) -> None:
            for ext in candidates:
                if extension_point_id is not None and ext.extension_point_id != extension_point_id:
                    continue
                if ext.id in seen:
                    continue
                seen.add(ext.id)
                collected.append(ext)

        for app in self.descriptors.list_apps():
            if active is not None and self.inherit_app_toggle and not self._is_app_enabled(app, active):
                continue
            take(app.extensions)
        take(self.descriptors.list_free_standing_extensions())
        return collected

    # ------------------------------------------------------------------
    # Apps
    # ------------------------------------------------------------------

    def get_all_apps(self) -> List[AppDescriptor]:
        """Every registered app, sorted by order."""
        return self._sort(self.descriptors.list_apps())

    def get_all_enabled_apps(self, context_model: Optional[Mapping[str, Any]] = None) -> List[AppDescriptor]:
        """Apps whose toggle is on, optionally also passing their require expression."""
        active = self._active_toggles()
        apps = [app for app in self.descriptors.list_apps() if self._is_app_enabled(app, active)]
        if context_model is not None:
            apps = [app for app in apps if self.evaluator.evaluate(app.require, context_model)]
        return self._sort(apps)

    def get_app(self, app_id: str) -> Optional[AppDescriptor]:
        for app in self.descriptors.list_apps():
            if app.id == app_id:
                return app
        return None

    # ------------------------------------------------------------------
    # Extensions
    # ------------------------------------------------------------------

    def get_all_extensions(self, extension_point_id: Optional[str] = None) -> List[Extension]:
        """Every extension plugged into ``extension_point_id`` (all points if None)."""
        return self._sort(self._collect_extensions(extension_point_id))

    def get_all_enabled_extensions(
        self,
        extension_point_id: Optional[str] = None,
        context_model: Optional[Mapping[str, Any]] = None,
    ) -> List[Extension]:
        """Enabled extensions for the point, require-filtered when a context is given.

        Raises:
            EvaluationError: If a require expression is malformed
        """
        active = self._active_toggles()
        extensions = [
            ext
            for ext in self._collect_extensions(extension_point_id, active)
            if self._is_extension_enabled(ext, active)
        ]
        if context_model is not None:
            extensions = [ext for ext in extensions if self.check_require_expression(ext, context_model)]
        return self._sort(extensions)

    def get_extension(self, extension_id: str) -> Optional[Extension]:
        for ext in self._collect_extensions(None):
            if ext.id == extension_id:
                return ext
        return None

    def check_require_expression(self, extension: Extension, context_model: Mapping[str, Any]) -> bool:
        """Evaluate the extension's require expression; True when it has none.

        Raises:
            EvaluationError: If the expression is malformed
        """
        return self.evaluator.evaluate(extension.require, context_model)

    # ------------------------------------------------------------------
    # Login locations
    # ------------------------------------------------------------------

    def get_login_locations(self) -> List[Location]:
        """Login locations accepted by every registered filter."""
        if self.login_locations is None:
            return []
        return [
            loc
            for loc in self.login_locations.login_locations()
            if all(f.accept(loc) for f in self.login_location_filters)
        ]


__all__ = ["ResolutionEngine"]
