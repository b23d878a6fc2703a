"""Shared CLI utilities."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from appframework.core.config.domains import RequireConfig
from appframework.core.config.manager import ConfigManager
from appframework.core.context import AppContextModel
from appframework.core.domain.models import AppDescriptor, Extension
from appframework.core.exceptions import ConfigurationError
from appframework.core.require.evaluator import ExpressionEvaluator
from appframework.core.resolution import ResolutionEngine, create_engine
from appframework.core.utils.io import read_yaml


def get_home(args: argparse.Namespace) -> Optional[Path]:
    home = getattr(args, "home", None)
    return Path(home) if home else None


def configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def get_engine(args: argparse.Namespace) -> ResolutionEngine:
    return create_engine(get_home(args))


def get_evaluator(args: argparse.Namespace) -> ExpressionEvaluator:
    """Evaluator configured from settings alone; descriptors are not loaded."""
    mgr = ConfigManager(home=get_home(args))
    require = RequireConfig(config=mgr.load_config(), manager=mgr)
    return ExpressionEvaluator(precedence=require.precedence, max_depth=require.max_depth)


def load_context(path: Optional[str]) -> Optional[AppContextModel]:
    """Read a context model document; None when no path is given."""
    if not path:
        return None
    try:
        data = read_yaml(Path(path), default={}, raise_on_error=True)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read context file {path}: {exc}", context={"path": path}) from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Context file must contain a mapping: {path}", context={"path": path})
    return AppContextModel(data)


def app_payload(app: AppDescriptor) -> Dict[str, Any]:
    return {
        "id": app.id,
        "label": app.label,
        "url": app.url,
        "order": app.order,
        "featureToggle": app.feature_toggle,
        "extensionPoints": [p.id for p in app.extension_points],
    }


def extension_payload(ext: Extension) -> Dict[str, Any]:
    return {
        "id": ext.id,
        "appId": ext.app_id,
        "extensionPointId": ext.extension_point_id,
        "type": ext.type,
        "label": ext.label,
        "url": ext.url,
        "order": ext.order,
        "featureToggle": ext.feature_toggle,
        "require": ext.require,
    }


__all__ = [
    "get_home",
    "configure_logging",
    "get_engine",
    "get_evaluator",
    "load_context",
    "app_payload",
    "extension_payload",
]
