"""Build a ResolutionEngine from layered configuration."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from appframework.core.config.domains import (
    DescriptorsConfig,
    FeaturesConfig,
    RequireConfig,
    ResolutionConfig,
)
from appframework.core.config.manager import ConfigManager
from appframework.core.features.toggles import FeatureToggles
from appframework.core.loader import DescriptorLoader
from appframework.core.require.evaluator import ExpressionEvaluator
from appframework.core.stores import (
    ComponentStateStore,
    DescriptorStore,
    LoginLocationFilter,
    LoginLocationStore,
    ToggleSource,
)

from .engine import ResolutionEngine

logger = logging.getLogger(__name__)


def create_engine(
    home: Optional[Path] = None,
    *,
    descriptors: Optional[DescriptorStore] = None,
    toggles: Optional[ToggleSource] = None,
    component_state: Optional[ComponentStateStore] = None,
    login_locations: Optional[LoginLocationStore] = None,
    login_location_filters: Iterable[LoginLocationFilter] = (),
) -> ResolutionEngine:
    """Create an engine configured from ``home``.

    Collaborators passed explicitly win over the configured ones: when
    ``descriptors`` is None the configured descriptor directories are loaded,
    when ``toggles`` is None the configured toggle file is used.

    Raises:
        ConfigurationError: On invalid settings or descriptor documents.
    """
    mgr = ConfigManager(home=home)
    cfg = mgr.load_config()
    resolution = ResolutionConfig(config=cfg, manager=mgr)
    require = RequireConfig(config=cfg, manager=mgr)

    if descriptors is None:
        paths = DescriptorsConfig(config=cfg, manager=mgr).paths
        descriptors = DescriptorLoader(paths).load()
    if toggles is None:
        toggles = FeatureToggles(FeaturesConfig(config=cfg, manager=mgr).toggles_file)

    logger.debug(
        "Creating engine (order=%s, precedence=%s, home=%s)", resolution.order, require.precedence, mgr.home
    )
    return ResolutionEngine(
        descriptors,
        toggles,
        evaluator=ExpressionEvaluator(precedence=require.precedence, max_depth=require.max_depth),
        component_state=component_state,
        login_locations=login_locations,
        login_location_filters=login_location_filters,
        order=resolution.order,
        inherit_app_toggle=resolution.inherit_app_toggle,
    )


__all__ = ["create_engine"]
