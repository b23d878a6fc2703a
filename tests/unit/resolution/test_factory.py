"""Tests for building a configured ResolutionEngine."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from appframework.core.exceptions import ConfigurationError
from appframework.core.features.toggles import FeatureToggles, StaticToggles
from appframework.core.resolution import create_engine
from appframework.core.stores import InMemoryDescriptorStore


@pytest.fixture
def configured_home(home: Path) -> Path:
    (home / "apps" / "core.yaml").write_text(
        yaml.safe_dump(
            {
                "apps": [
                    {"id": "first", "order": 1},
                    {"id": "second", "order": 2, "featureToggle": "beta"},
                ],
                "extensions": [
                    {"id": "link", "extensionPointId": "header", "order": 5, "require": "user.admin"},
                ],
            }
        ),
        encoding="utf-8",
    )
    (home / "feature_toggles.yaml").write_text("toggles:\n  beta: true\n", encoding="utf-8")
    return home


class TestCreateEngine:
    def test_loads_descriptors_and_toggles(self, configured_home: Path):
        engine = create_engine(configured_home)
        assert isinstance(engine.toggles, FeatureToggles)
        assert [a.id for a in engine.get_all_enabled_apps()] == ["second", "first"]
        assert [e.id for e in engine.get_all_enabled_extensions("header", {"user": {"admin": True}})] == ["link"]
        assert engine.get_all_enabled_extensions("header", {}) == []

    def test_settings_flow_into_engine(self, configured_home: Path):
        (configured_home / "config" / "settings.yaml").write_text(
            yaml.safe_dump(
                {
                    "resolution": {"order": "ascending", "inherit_app_toggle": False},
                    "require": {"precedence": "standard", "max_depth": 8},
                }
            ),
            encoding="utf-8",
        )
        engine = create_engine(configured_home)
        assert engine.order == "ascending"
        assert engine.inherit_app_toggle is False
        assert engine.evaluator.precedence == "standard"
        assert engine.evaluator.max_depth == 8
        assert [a.id for a in engine.get_all_apps()] == ["first", "second"]

    def test_explicit_collaborators_win(self, configured_home: Path):
        store = InMemoryDescriptorStore()
        engine = create_engine(configured_home, descriptors=store, toggles=StaticToggles())
        assert engine.descriptors is store
        assert engine.get_all_apps() == []

    def test_invalid_setting(self, home: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("APPFRAMEWORK_RESOLUTION__ORDER", "random")
        with pytest.raises(ConfigurationError):
            create_engine(home)

    def test_toggle_file_setting(self, configured_home: Path):
        (configured_home / "other_toggles.yaml").write_text("beta: false\n", encoding="utf-8")
        (configured_home / "config" / "features.yaml").write_text(
            "features:\n  toggles_file: other_toggles.yaml\n", encoding="utf-8"
        )
        engine = create_engine(configured_home)
        assert [a.id for a in engine.get_all_enabled_apps()] == ["first"]
