"""Tests for feature toggle expressions and toggle sources."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from appframework.core.features.toggles import (
    FeatureToggles,
    StaticToggles,
    active_names_from_mapping,
    is_toggle_on,
)


# =============================================================================
# is_toggle_on
# =============================================================================


class TestIsToggleOn:
    @pytest.mark.parametrize("expr", [None, "", "   "])
    def test_empty_expression_is_always_on(self, expr):
        assert is_toggle_on(expr, set()) is True
        assert is_toggle_on(expr, {"anything"}) is True

    def test_named_toggle_follows_active_set(self):
        assert is_toggle_on("beta", {"beta"}) is True
        assert is_toggle_on("beta", {"gamma"}) is False

    def test_negated_toggle_is_inverse(self):
        assert is_toggle_on("!beta", {"beta"}) is False
        assert is_toggle_on("!beta", set()) is True

    def test_unknown_name_is_inactive(self):
        assert is_toggle_on("neverDefined", set()) is False

    def test_surrounding_whitespace_is_ignored(self):
        assert is_toggle_on("  beta ", {"beta"}) is True
        assert is_toggle_on(" ! beta", {"beta"}) is False


# =============================================================================
# Toggle documents
# =============================================================================


class TestActiveNamesFromMapping:
    def test_toggles_key(self):
        data = {"toggles": {"a": True, "b": False, "c": "on", "d": "off"}}
        assert active_names_from_mapping(data) == frozenset({"a", "c"})

    def test_flat_mapping(self):
        assert active_names_from_mapping({"a": 1, "b": 0}) == frozenset({"a"})

    def test_non_mapping_toggles_section(self):
        assert active_names_from_mapping({"toggles": ["a"]}) == frozenset()


class TestFeatureToggles:
    def test_missing_file_means_nothing_active(self, tmp_path: Path):
        toggles = FeatureToggles(tmp_path / "missing.yaml")
        assert toggles.active_toggle_names() == frozenset()
        assert toggles.is_toggle_on("!beta") is True

    def test_no_file_configured(self):
        assert FeatureToggles().active_toggle_names() == frozenset()

    def test_reads_file(self, tmp_path: Path):
        path = tmp_path / "feature_toggles.yaml"
        path.write_text("toggles:\n  beta: true\n  legacy: false\n", encoding="utf-8")
        toggles = FeatureToggles(path)
        assert toggles.active_toggle_names() == frozenset({"beta"})
        assert toggles.is_toggle_on("beta") is True
        assert toggles.is_toggle_on("legacy") is False

    def test_reloads_when_file_changes(self, tmp_path: Path):
        path = tmp_path / "feature_toggles.yaml"
        path.write_text("toggles:\n  beta: true\n", encoding="utf-8")
        toggles = FeatureToggles(path)
        assert toggles.active_toggle_names() == frozenset({"beta"})

        path.write_text("toggles:\n  beta: false\n  gamma: true\n", encoding="utf-8")
        stat = path.stat()
        os.utime(path, (stat.st_atime, stat.st_mtime + 10))
        assert toggles.active_toggle_names() == frozenset({"gamma"})

    def test_removed_file_clears_toggles(self, tmp_path: Path):
        path = tmp_path / "feature_toggles.yaml"
        path.write_text("beta: true\n", encoding="utf-8")
        toggles = FeatureToggles(path)
        assert toggles.active_toggle_names() == frozenset({"beta"})
        path.unlink()
        assert toggles.active_toggle_names() == frozenset()

    def test_non_mapping_file_is_ignored(self, tmp_path: Path, caplog):
        path = tmp_path / "feature_toggles.yaml"
        path.write_text("- beta\n- gamma\n", encoding="utf-8")
        toggles = FeatureToggles(path)
        assert toggles.active_toggle_names() == frozenset()
        assert "must contain a mapping" in caplog.text

    def test_set_toggles_file(self, tmp_path: Path):
        path = tmp_path / "t.yaml"
        path.write_text("beta: yes\n", encoding="utf-8")
        toggles = FeatureToggles()
        toggles.set_toggles_file(path)
        assert toggles.toggles_file == path
        assert toggles.active_toggle_names() == frozenset({"beta"})


class TestStaticToggles:
    def test_fixed_set(self):
        toggles = StaticToggles({"beta"})
        assert toggles.active_toggle_names() == frozenset({"beta"})
        assert toggles.is_toggle_on("!beta") is False
