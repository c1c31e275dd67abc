"""Tests for intent resolution and plan expansion."""

from __future__ import annotations

import pytest

from nexus.core.errors import (
    IntentNotFoundError,
    NoIntentsError,
    ServiceNotFoundError,
    StateNotFoundError,
)
from nexus.core.plan_builder import build_plan, resolve_intent_name
from nexus.models.manifest import Manifest


def _manifest(intents: dict, services: dict | None = None, **extra) -> Manifest:
    return Manifest.model_validate(
        {"services": services or {}, "intents": intents, **extra}
    )


class TestResolveIntentName:
    def test_explicit_name(self, manifest: Manifest):
        assert resolve_intent_name(manifest, "backend") == "backend"

    def test_explicit_name_missing(self, manifest: Manifest):
        with pytest.raises(IntentNotFoundError, match="Intent not found: nope"):
            resolve_intent_name(manifest, "nope")

    def test_default_intent_wins(self):
        manifest = _manifest({"feature": {}, "ops": {}}, defaultIntent="ops")
        assert resolve_intent_name(manifest, None) == "ops"

    def test_undeclared_default_intent_ignored(self):
        manifest = _manifest({"first": {}, "feature": {}}, defaultIntent="ghost")
        assert resolve_intent_name(manifest) == "feature"

    def test_feature_before_first(self):
        manifest = _manifest({"first": {}, "feature": {}})
        assert resolve_intent_name(manifest) == "feature"

    def test_first_declared(self):
        manifest = _manifest({"zeta": {}, "alpha": {}})
        assert resolve_intent_name(manifest) == "zeta"

    def test_no_intents(self):
        with pytest.raises(NoIntentsError):
            resolve_intent_name(_manifest({}))


class TestBuildPlan:
    def test_order_follows_intent_then_state_list(self, manifest: Manifest):
        plan = build_plan(manifest, "feature")
        assert [item.key for item in plan] == [
            "api:deps",
            "api:schema",
            "api:env",
            "web:deps",
            "web:inherit",
        ]

    def test_item_carries_type_config_and_service(self, manifest: Manifest):
        item = build_plan(manifest, "feature")[3]
        assert item.service_name == "web"
        assert item.type == "package.deps"
        assert item.config == {"type": "package.deps", "lockfile": "yarn.lock"}
        assert item.service.root == "web"

    def test_scoped_intent(self, manifest: Manifest):
        assert [i.key for i in build_plan(manifest, "backend")] == ["api:deps"]

    def test_keys_unique(self, manifest: Manifest):
        keys = [item.key for item in build_plan(manifest, "feature")]
        assert len(keys) == len(set(keys))

    def test_service_not_found(self):
        manifest = _manifest(
            {"feature": {"desired": {"services": {"api": {"states": ["deps"]}, "ghost": {"states": []}}}}},
            services={"api": {"states": {"deps": {"type": "package.deps"}}}},
        )
        with pytest.raises(ServiceNotFoundError, match="Service not found: ghost"):
            build_plan(manifest, "feature")

    def test_state_not_found(self):
        manifest = _manifest(
            {"feature": {"desired": {"services": {"api": {"states": ["migrate"]}}}}},
            services={"api": {"states": {"deps": {"type": "package.deps"}}}},
        )
        with pytest.raises(StateNotFoundError, match="api.migrate"):
            build_plan(manifest, "feature")

    def test_state_without_type(self):
        manifest = _manifest(
            {"feature": {"desired": {"services": {"api": {"states": ["deps"]}}}}},
            services={"api": {"states": {"deps": {"lockfile": "x.lock"}}}},
        )
        with pytest.raises(StateNotFoundError):
            build_plan(manifest, "feature")

    def test_null_state(self):
        manifest = _manifest(
            {"feature": {"desired": {"services": {"api": {"states": ["deps"]}}}}},
            services={"api": {"states": {"deps": None}}},
        )
        with pytest.raises(StateNotFoundError):
            build_plan(manifest, "feature")

    @pytest.mark.parametrize("entry", [{"type": None}, {"type": ""}, {"type": 7}, "package.deps"])
    def test_referenced_state_with_unusable_type(self, entry):
        manifest = _manifest(
            {"feature": {"desired": {"services": {"api": {"states": ["deps"]}}}}},
            services={"api": {"states": {"deps": entry}}},
        )
        with pytest.raises(StateNotFoundError, match="api.deps"):
            build_plan(manifest, "feature")

    @pytest.mark.parametrize("entry", [{"type": None}, {"type": 7}, "package.deps", ["x"]])
    def test_unreferenced_malformed_state_is_ignored(self, entry):
        manifest = _manifest(
            {"feature": {"desired": {"services": {"api": {"states": ["deps"]}}}}},
            services={"api": {"states": {"deps": {"type": "package.deps"}, "legacy": entry}}},
        )
        plan = build_plan(manifest, "feature")
        assert [item.key for item in plan] == ["api:deps"]

    def test_intent_without_desired_services(self):
        manifest = _manifest({"feature": {"scope": {"all": True}}})
        with pytest.raises(IntentNotFoundError, match="no desired services"):
            build_plan(manifest, "feature")

    def test_non_list_states_treated_as_empty(self):
        manifest = _manifest(
            {"feature": {"desired": {"services": {"api": {"states": "deps"}}}}},
            services={"api": {"states": {"deps": {"type": "package.deps"}}}},
        )
        assert build_plan(manifest, "feature") == []

    def test_does_not_reorder_by_dependencies(self):
        manifest = _manifest(
            {"feature": {"desired": {"services": {"web": {"states": ["up"]}, "api": {"states": ["up"]}}}}},
            services={
                "api": {"states": {"up": {"type": "process.http", "port": 1}}},
                "web": {
                    "requires": {"services": ["api"]},
                    "states": {"up": {"type": "process.http", "port": 2}},
                },
            },
        )
        assert [i.service_name for i in build_plan(manifest, "feature")] == ["web", "api"]
