"""Tests for the dependency graph — edge derivation, dedup, queries."""

from __future__ import annotations

from nexus.core.graph_builder import DependencyGraph, build_graph
from nexus.models.manifest import Manifest


def _manifest(services: dict) -> Manifest:
    return Manifest.model_validate({"services": services, "intents": {}})


class TestBuildGraph:
    def test_sample_edges(self, manifest: Manifest):
        edges = [e.to_report() for e in build_graph(manifest)]
        assert edges == [
            {"from": "web", "to": "api", "reason": "requires"},
            {"from": "web", "to": "api", "reason": "consumes API_URL"},
            {"from": "web", "to": "api", "reason": "consumes API_TOKEN"},
        ]

    def test_deterministic(self, manifest: Manifest):
        first = [e.to_report() for e in build_graph(manifest)]
        second = [e.to_report() for e in build_graph(manifest)]
        assert first == second

    def test_duplicate_requires_suppressed(self):
        manifest = _manifest({"web": {"requires": {"services": ["api", "api"]}}})
        assert len(build_graph(manifest)) == 1

    def test_same_var_from_same_provider_once(self):
        manifest = _manifest(
            {
                "web": {
                    "requires": {"services": ["api"]},
                    "consumes": {"env": {"API_URL": {"from": "api.API_URL"}}},
                },
            }
        )
        reasons = [e.reason for e in build_graph(manifest)]
        assert reasons == ["requires", "consumes API_URL"]

    def test_bindings_without_provider_ignored(self):
        manifest = _manifest(
            {
                "web": {
                    "consumes": {
                        "env": {
                            "LOCAL": {"from": "literal"},
                            "PORT": 3000,
                            "EMPTY": None,
                            "NUMERIC": {"from": 12},
                        }
                    }
                },
            }
        )
        assert build_graph(manifest) == []

    def test_provider_is_text_before_first_dot(self):
        manifest = _manifest(
            {"web": {"consumes": {"env": {"DSN": {"from": "db.primary.DSN"}}}}}
        )
        (edge,) = build_graph(manifest)
        assert edge.to == "db"
        assert edge.reason == "consumes DSN"

    def test_undeclared_services_not_validated(self):
        manifest = _manifest({"web": {"requires": {"services": ["ghost"]}}})
        (edge,) = build_graph(manifest)
        assert edge.to == "ghost"

    def test_declared_service_order(self):
        manifest = _manifest(
            {
                "b": {"requires": {"services": ["c"]}},
                "a": {"requires": {"services": ["c"]}},
            }
        )
        assert [e.from_ for e in build_graph(manifest)] == ["b", "a"]

    def test_no_edges(self):
        assert build_graph(_manifest({"api": {}})) == []


class TestDependencyGraph:
    def _graph(self) -> DependencyGraph:
        return DependencyGraph.from_manifest(
            _manifest(
                {
                    "web": {"requires": {"services": ["api"]}},
                    "api": {
                        "requires": {"services": ["db"]},
                        "consumes": {"env": {"CACHE_URL": {"from": "cache.URL"}}},
                    },
                    "worker": {"requires": {"services": ["db"]}},
                }
            )
        )

    def test_services_first_seen_order(self):
        assert self._graph().services == ["web", "api", "db", "cache", "worker"]

    def test_dependencies_of(self):
        assert self._graph().dependencies_of("api") == ["db", "cache"]
        assert self._graph().dependencies_of("db") == []

    def test_dependents_transitive(self):
        assert self._graph().dependents_of("db") == ["api", "worker", "web"]

    def test_dependents_of_unknown_service(self):
        assert self._graph().dependents_of("nope") == []

    def test_edges_touching(self):
        touching = self._graph().edges_touching("api")
        assert [str(e) for e in touching] == [
            "web -> api (requires)",
            "api -> db (requires)",
            "api -> cache (consumes CACHE_URL)",
        ]

    def test_cycle_does_not_loop(self):
        graph = DependencyGraph.from_manifest(
            _manifest(
                {
                    "a": {"requires": {"services": ["b"]}},
                    "b": {"requires": {"services": ["a"]}},
                }
            )
        )
        assert graph.dependents_of("a") == ["b"]
