"""Service dependency graph derived from ``requires`` and ``consumes`` declarations.

The graph is diagnostic: it never validates that named services exist and
imposes no ordering on observation.
"""

from __future__ import annotations

from collections import deque

from nexus.models.graph import REQUIRES_REASON, GraphEdge
from nexus.models.manifest import Manifest


def build_graph(manifest: Manifest) -> list[GraphEdge]:
    """Derive the ordered, deduplicated edge list for a manifest.

    Services are walked in declared order. Each ``requires.services`` entry
    yields a ``requires`` edge; each ``consumes.env`` binding whose ``from``
    is ``<service>.<VAR>`` yields a ``consumes <VAR>`` edge to the provider.
    Identical (from, to, reason) triples appear once.
    """
    edges: list[GraphEdge] = []
    seen: set[tuple[str, str, str]] = set()

    def add(from_: str, to: str, reason: str) -> None:
        key = (from_, to, reason)
        if key in seen:
            return
        seen.add(key)
        edges.append(GraphEdge(from_=from_, to=to, reason=reason))

    for service_name, service in manifest.services.items():
        for required in service.requires.services:
            add(service_name, required, REQUIRES_REASON)
        for var_name, binding in service.consumes.env.items():
            provider = binding.provider
            if provider is not None:
                add(service_name, provider, f"consumes {var_name}")
    return edges


class DependencyGraph:
    """Query view over a list of service edges.

    Edges point from a consumer to the service it depends on.

    Parameters
    ----------
    edges:
        Output of :func:`build_graph`.
    """

    def __init__(self, edges: list[GraphEdge]) -> None:
        self._edges = list(edges)
        # Forward: service -> services it depends on
        self._dependencies: dict[str, list[str]] = {}
        # Reverse: service -> services that depend on it
        self._dependents: dict[str, list[str]] = {}
        self._services: list[str] = []
        for edge in self._edges:
            for name in (edge.from_, edge.to):
                if name not in self._dependencies:
                    self._dependencies[name] = []
                    self._dependents[name] = []
                    self._services.append(name)
            if edge.to not in self._dependencies[edge.from_]:
                self._dependencies[edge.from_].append(edge.to)
            if edge.from_ not in self._dependents[edge.to]:
                self._dependents[edge.to].append(edge.from_)

    @classmethod
    def from_manifest(cls, manifest: Manifest) -> DependencyGraph:
        return cls(build_graph(manifest))

    @property
    def edges(self) -> list[GraphEdge]:
        return list(self._edges)

    @property
    def services(self) -> list[str]:
        """Every service named by an edge, in first-seen order."""
        return list(self._services)

    def dependencies_of(self, service: str) -> list[str]:
        """Return the services *service* directly depends on."""
        return list(self._dependencies.get(service, []))

    def dependents_of(self, service: str) -> list[str]:
        """Return all transitive dependents of *service* (BFS)."""
        result: list[str] = []
        queue = deque(self._dependents.get(service, []))
        visited: set[str] = {service}
        while queue:
            node = queue.popleft()
            if node in visited:
                continue
            visited.add(node)
            result.append(node)
            queue.extend(self._dependents.get(node, []))
        return result

    def edges_touching(self, service: str) -> list[GraphEdge]:
        """Edges where *service* is either end, in graph order."""
        return [e for e in self._edges if service in (e.from_, e.to)]
