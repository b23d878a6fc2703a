"""Tests for ResolutionEngine.

Store layout (see conftest ``descriptor_store``):
- app-high (order 10) with attached ext-a (5) and ext-b (20) on 'dashboard'
- app-low (order 1) behind toggle 'lowApp'
- free-standing ext-c (0, 'beta') and ext-d (-3, '!beta') on 'dashboard'
- free-standing ext-e (7) on 'header'
"""
from __future__ import annotations

import pytest

from appframework.core.context import AppContextModel
from appframework.core.domain.models import AppDescriptor, Extension
from appframework.core.exceptions import EvaluationError
from appframework.core.features.toggles import StaticToggles, is_toggle_on
from appframework.core.require import ExpressionEvaluator, STANDARD
from appframework.core.resolution import ResolutionEngine
from appframework.core.stores import (
    InMemoryComponentState,
    InMemoryDescriptorStore,
    InMemoryLoginLocations,
    Location,
)


def _ids(items):
    return [i.id for i in items]


# =============================================================================
# Apps
# =============================================================================


class TestApps:
    def test_all_apps_sorted_descending(self, engine):
        assert _ids(engine.get_all_apps()) == ["app-high", "app-low"]

    def test_all_apps_ignores_toggles(self, engine):
        assert len(engine.get_all_apps()) == 2

    def test_enabled_apps_follow_toggles(self, descriptor_store):
        assert _ids(ResolutionEngine(descriptor_store, StaticToggles()).get_all_enabled_apps()) == ["app-high"]
        engine = ResolutionEngine(descriptor_store, StaticToggles({"lowApp"}))
        assert _ids(engine.get_all_enabled_apps()) == ["app-high", "app-low"]

    def test_enabled_apps_with_require(self):
        store = InMemoryDescriptorStore(
            apps=[
                AppDescriptor(id="inpatient", order=2, require="visit.admitted"),
                AppDescriptor(id="outpatient", order=1, require="visit.active"),
                AppDescriptor(id="always", order=0),
            ]
        )
        engine = ResolutionEngine(store, StaticToggles())
        ctx = AppContextModel(visit={"active": True, "admitted": False})
        assert _ids(engine.get_all_enabled_apps(ctx)) == ["outpatient", "always"]
        assert _ids(engine.get_all_enabled_apps()) == ["inpatient", "outpatient", "always"]

    @pytest.mark.parametrize(
        "active",
        [frozenset(), frozenset({"app1Toggle"}), frozenset({"app1Toggle", "app2Toggle"})],
    )
    def test_negated_app_toggles_flip_enabled_set(self, active):
        plain = InMemoryDescriptorStore(
            apps=[
                AppDescriptor(id="app1", order=2, feature_toggle="app1Toggle"),
                AppDescriptor(id="app2", order=1, feature_toggle="app2Toggle"),
            ]
        )
        negated = InMemoryDescriptorStore(
            apps=[
                AppDescriptor(id="app1", order=2, feature_toggle="!app1Toggle"),
                AppDescriptor(id="app2", order=1, feature_toggle="!app2Toggle"),
            ]
        )
        enabled = set(_ids(ResolutionEngine(plain, StaticToggles(active)).get_all_enabled_apps()))
        flipped = set(_ids(ResolutionEngine(negated, StaticToggles(active)).get_all_enabled_apps()))
        assert enabled == {"app1", "app2"} & {name.replace("Toggle", "") for name in active}
        assert flipped == {"app1", "app2"} - enabled

    def test_opposite_polarity_apps(self):
        store = InMemoryDescriptorStore(
            apps=[
                AppDescriptor(id="new-header", feature_toggle="appXToggle"),
                AppDescriptor(id="old-header", feature_toggle="!appXToggle"),
            ]
        )
        assert _ids(ResolutionEngine(store, StaticToggles()).get_all_enabled_apps()) == ["old-header"]
        assert _ids(ResolutionEngine(store, StaticToggles({"appXToggle"})).get_all_enabled_apps()) == ["new-header"]

    def test_ascending_order(self, descriptor_store):
        engine = ResolutionEngine(descriptor_store, StaticToggles(), order="ascending")
        assert _ids(engine.get_all_apps()) == ["app-low", "app-high"]

    def test_get_app(self, engine):
        assert engine.get_app("app-low").label == "Low"
        assert engine.get_app("missing") is None

    def test_disabled_component_state(self, descriptor_store):
        state = InMemoryComponentState()
        state.disable("app-high", "app")
        engine = ResolutionEngine(descriptor_store, StaticToggles({"lowApp"}), component_state=state)
        assert _ids(engine.get_all_enabled_apps()) == ["app-low"]
        assert _ids(engine.get_all_apps()) == ["app-high", "app-low"]


# =============================================================================
# Extensions
# =============================================================================


class TestExtensions:
    def test_all_extensions_for_point(self, engine):
        assert _ids(engine.get_all_extensions("dashboard")) == ["ext-b", "ext-a", "ext-c", "ext-d"]

    def test_all_extensions_every_point(self, engine):
        assert _ids(engine.get_all_extensions()) == ["ext-b", "ext-e", "ext-a", "ext-c", "ext-d"]

    def test_unknown_point_is_empty(self, engine):
        assert engine.get_all_extensions("nowhere") == []
        assert engine.get_all_enabled_extensions("nowhere") == []

    def test_enabled_extensions_without_toggle(self, engine):
        assert _ids(engine.get_all_enabled_extensions("dashboard")) == ["ext-b", "ext-a", "ext-d"]

    def test_negated_toggle_flips_visibility(self, descriptor_store):
        off = ResolutionEngine(descriptor_store, StaticToggles()).get_all_enabled_extensions("dashboard")
        on = ResolutionEngine(descriptor_store, StaticToggles({"beta"})).get_all_enabled_extensions("dashboard")
        assert "ext-d" in _ids(off) and "ext-c" not in _ids(off)
        assert "ext-c" in _ids(on) and "ext-d" not in _ids(on)
        assert set(_ids(off)) ^ set(_ids(on)) == {"ext-c", "ext-d"}

    def test_union_without_duplicates(self):
        attached = Extension(id="shared", app_id="app", extension_point_id="p", order=1)
        store = InMemoryDescriptorStore(
            apps=[AppDescriptor(id="app", extensions=[attached])],
            extensions=[
                Extension(id="shared", extension_point_id="p", order=99),
                Extension(id="other", extension_point_id="p", order=2),
            ],
        )
        result = ResolutionEngine(store, StaticToggles()).get_all_extensions("p")
        assert _ids(result) == ["other", "shared"]
        assert result[1] is attached

    def test_extensions_of_disabled_app_hidden(self, descriptor_store):
        descriptor_store.list_apps()[1].feature_toggle = "highApp"
        engine = ResolutionEngine(descriptor_store, StaticToggles())
        assert _ids(engine.get_all_enabled_extensions("dashboard")) == ["ext-d"]
        assert _ids(engine.get_all_extensions("dashboard")) == ["ext-b", "ext-a", "ext-c", "ext-d"]

    def test_app_toggle_not_inherited_when_disabled(self, descriptor_store):
        descriptor_store.list_apps()[1].feature_toggle = "highApp"
        engine = ResolutionEngine(descriptor_store, StaticToggles(), inherit_app_toggle=False)
        assert _ids(engine.get_all_enabled_extensions("dashboard")) == ["ext-b", "ext-a", "ext-d"]

    def test_disabled_extension(self, descriptor_store):
        state = InMemoryComponentState()
        state.disable("ext-b", "extension")
        engine = ResolutionEngine(descriptor_store, StaticToggles(), component_state=state)
        assert _ids(engine.get_all_enabled_extensions("dashboard")) == ["ext-a", "ext-d"]

    @pytest.mark.parametrize("active", [frozenset(), frozenset({"beta"})])
    def test_idempotent(self, descriptor_store, active):
        engine = ResolutionEngine(descriptor_store, StaticToggles(active))
        first = engine.get_all_enabled_extensions("dashboard")
        second = engine.get_all_enabled_extensions("dashboard")
        assert _ids(first) == _ids(second)
        assert [e for e in first if is_toggle_on(e.feature_toggle, active)] == first
        assert _ids(descriptor_store.list_free_standing_extensions()) == ["ext-c", "ext-d", "ext-e"]

    def test_get_extension(self, engine):
        assert engine.get_extension("ext-a").app_id == "app-high"
        assert engine.get_extension("ext-e").extension_point_id == "header"
        assert engine.get_extension("missing") is None


# =============================================================================
# Require expressions
# =============================================================================


@pytest.fixture
def require_store() -> InMemoryDescriptorStore:
    return InMemoryDescriptorStore(
        extensions=[
            Extension(id="start-visit", extension_point_id="actions", order=3, require="!visit"),
            Extension(id="end-visit", extension_point_id="actions", order=2, require="visit.active"),
            Extension(id="admit", extension_point_id="actions", order=1, require="visit.admitted"),
            Extension(id="print", extension_point_id="actions", order=0),
        ]
    )


class TestRequireFiltering:
    def test_filters_by_context(self, require_store, visit_context):
        engine = ResolutionEngine(require_store, StaticToggles())
        assert _ids(engine.get_all_enabled_extensions("actions", visit_context)) == ["end-visit", "print"]

    def test_empty_context_differs_from_no_context(self, require_store):
        engine = ResolutionEngine(require_store, StaticToggles())
        assert _ids(engine.get_all_enabled_extensions("actions", AppContextModel())) == ["start-visit", "print"]
        assert len(engine.get_all_enabled_extensions("actions")) == 4

    def test_toggles_applied_before_require(self, visit_context):
        store = InMemoryDescriptorStore(
            extensions=[Extension(id="x", extension_point_id="p", feature_toggle="beta", require="visit.active")]
        )
        engine = ResolutionEngine(store, StaticToggles())
        assert engine.get_all_enabled_extensions("p", visit_context) == []

    def test_check_require_expression(self, engine, visit_context):
        assert engine.check_require_expression(Extension(id="x"), visit_context) is True
        assert engine.check_require_expression(Extension(id="x", require="visit.admitted"), visit_context) is False
        assert engine.check_require_expression(
            Extension(id="x", require="hasMemberWithProperty(sessionLocation.tags, 'display', 'Login Location')"),
            visit_context,
        ) is True

    def test_malformed_require_raises_with_context(self, visit_context):
        store = InMemoryDescriptorStore(extensions=[Extension(id="bad", extension_point_id="p", require="visit &&")])
        engine = ResolutionEngine(store, StaticToggles())
        assert _ids(engine.get_all_enabled_extensions("p")) == ["bad"]
        with pytest.raises(EvaluationError):
            engine.get_all_enabled_extensions("p", visit_context)

    def test_engine_uses_injected_evaluator(self):
        store = InMemoryDescriptorStore(
            extensions=[Extension(id="x", extension_point_id="p", require="a || b && c")]
        )
        ctx = {"a": True, "b": False, "c": False}
        assert ResolutionEngine(store, StaticToggles()).get_all_enabled_extensions("p", ctx) == []
        engine = ResolutionEngine(store, StaticToggles(), evaluator=ExpressionEvaluator(precedence=STANDARD))
        assert _ids(engine.get_all_enabled_extensions("p", ctx)) == ["x"]


# =============================================================================
# Login locations
# =============================================================================


class _UuidFilter:
    def __init__(self, allowed):
        self.allowed = set(allowed)

    def accept(self, location):
        return location.uuid in self.allowed


class TestLoginLocations:
    def test_no_store(self, engine):
        assert engine.get_login_locations() == []

    def test_without_filters(self, descriptor_store):
        locations = InMemoryLoginLocations([Location(uuid="a"), Location(uuid="b")])
        engine = ResolutionEngine(descriptor_store, StaticToggles(), login_locations=locations)
        assert [loc.uuid for loc in engine.get_login_locations()] == ["a", "b"]

    def test_every_filter_must_accept(self, descriptor_store):
        locations = InMemoryLoginLocations([Location(uuid=u) for u in ("a", "b", "c")])
        engine = ResolutionEngine(
            descriptor_store,
            StaticToggles(),
            login_locations=locations,
            login_location_filters=[_UuidFilter({"a", "b"}), _UuidFilter({"b", "c"})],
        )
        assert [loc.uuid for loc in engine.get_login_locations()] == ["b"]
