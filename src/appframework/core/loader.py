"""Load app and extension descriptors from YAML/JSON documents.

Each document may hold an ``apps`` list and/or an ``extensions`` list of
free-standing extensions::

    apps:
      - id: referenceapplication.registrationapp
        label: Register a patient
        url: registrationapp/registerPatient.page
        order: 10
        featureToggle: newRegistration
        extensionPoints: [patientDashboard.visitActions]
        extensions:
          - id: registration.editPatient
            extensionPointId: patientDashboard.overallActions
            require: "visit.active"
    extensions:
      - id: home.logout
        extensionPointId: header.links
        order: -100

Keys may be written in camelCase or snake_case.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from appframework.core.domain.models import AppDescriptor, Extension, ExtensionPoint
from appframework.core.exceptions import ConfigurationError
from appframework.core.schemas.validation import validate_payload
from appframework.core.stores import InMemoryDescriptorStore
from appframework.core.utils.io import iter_document_files, read_yaml

logger = logging.getLogger(__name__)


def _field(raw: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in raw and raw[camel] is not None:
        return raw[camel]
    if snake in raw and raw[snake] is not None:
        return raw[snake]
    return default


def parse_extension(raw: Mapping[str, Any], *, app_id: str = "", source: Optional[str] = None) -> Extension:
    """Build an Extension from a validated descriptor mapping."""
    validate_payload(raw, "extension", source=source)
    return Extension(
        id=raw["id"],
        app_id=_field(raw, "appId", "app_id", app_id) or app_id,
        extension_point_id=_field(raw, "extensionPointId", "extension_point_id"),
        type=raw.get("type") or "link",
        label=raw.get("label"),
        url=raw.get("url"),
        order=raw.get("order") or 0,
        icon=raw.get("icon"),
        feature_toggle=_field(raw, "featureToggle", "feature_toggle"),
        require=raw.get("require"),
        extension_params=dict(_field(raw, "extensionParams", "extension_params", {}) or {}),
    )


def _parse_extension_point(raw: Any) -> ExtensionPoint:
    if isinstance(raw, str):
        return ExtensionPoint(raw)
    return ExtensionPoint(raw["id"], raw.get("description"))


def parse_app(raw: Mapping[str, Any], *, source: Optional[str] = None) -> AppDescriptor:
    """Build an AppDescriptor (with its attached extensions) from a mapping."""
    validate_payload(raw, "app", source=source)
    app = AppDescriptor(
        id=raw["id"],
        description=raw.get("description"),
        label=raw.get("label"),
        url=raw.get("url"),
        icon=raw.get("icon"),
        tiny_icon=_field(raw, "tinyIcon", "tiny_icon"),
        order=raw.get("order") or 0,
        feature_toggle=_field(raw, "featureToggle", "feature_toggle"),
        extension_points=[
            _parse_extension_point(p)
            for p in _field(raw, "extensionPoints", "extension_points", []) or []
        ],
        require=raw.get("require"),
        config=dict(raw.get("config") or {}),
    )
    app.extensions = [
        parse_extension(ext, app_id=app.id, source=source) for ext in raw.get("extensions") or []
    ]
    return app


class DescriptorLoader:
    """Read descriptor documents from directories into a descriptor store."""

    def __init__(self, paths: Iterable[Path]) -> None:
        self.paths = [Path(p) for p in paths]

    def iter_documents(self) -> List[Path]:
        files: List[Path] = []
        for path in self.paths:
            if path.is_file():
                files.append(path)
            elif path.is_dir():
                files.extend(iter_document_files(path))
            else:
                logger.debug("Descriptor path %s does not exist; skipping", path)
        return files

    def _read(self, path: Path) -> Dict[str, Any]:
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(
                f"Cannot read descriptor document {path}: {exc}", context={"source": str(path)}
            ) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Descriptor document must be a mapping with 'apps' and/or 'extensions': {path}",
                context={"source": str(path)},
            )
        return data

    def parse_document(self, path: Path) -> Tuple[List[AppDescriptor], List[Extension]]:
        data = self._read(path)
        source = str(path)
        for key in ("apps", "extensions"):
            if not isinstance(data.get(key) or [], list):
                raise ConfigurationError(
                    f"'{key}' must be a list in {path}", context={"source": source, "key": key}
                )
        apps = [parse_app(raw, source=source) for raw in data.get("apps") or []]
        extensions = [parse_extension(raw, source=source) for raw in data.get("extensions") or []]
        return apps, extensions

    def load_into(self, store: InMemoryDescriptorStore) -> InMemoryDescriptorStore:
        """Add every document's descriptors to ``store``.

        Raises:
            ConfigurationError: On unreadable or invalid documents and duplicate ids.
        """
        attached: Dict[str, str] = {}
        for path in self.iter_documents():
            apps, extensions = self.parse_document(path)
            for app in apps:
                for ext in app.extensions:
                    if ext.id in attached:
                        raise ConfigurationError(
                            f"Duplicate extension id '{ext.id}' in apps '{attached[ext.id]}' and '{app.id}'",
                            context={"kind": "extension", "id": ext.id, "source": str(path)},
                        )
                    attached[ext.id] = app.id
            store.add_apps(apps)
            store.add_extensions(extensions)
            logger.debug(
                "Loaded %d apps and %d free-standing extensions from %s", len(apps), len(extensions), path
            )
        return store

    def load(self) -> InMemoryDescriptorStore:
        return self.load_into(InMemoryDescriptorStore())


__all__ = ["DescriptorLoader", "parse_app", "parse_extension"]
