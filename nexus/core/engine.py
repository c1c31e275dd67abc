"""Reconciliation engine — the coordinator for ``status``, ``graph``, ``dev`` and ``sync``.

Each flow is a single pass: load -> plan -> observe -> summarize, with
``dev`` / ``sync`` additionally persisting the observation set. Every stage
consumes only the previous stage's output.
"""

from __future__ import annotations

import logging
from pathlib import Path

from nexus.config import NexusConfig
from nexus.core.graph_builder import build_graph
from nexus.core.manifest_loader import LoadedManifest, load_manifest
from nexus.core.plan_builder import build_plan, resolve_intent_name
from nexus.core.state_store import is_stale, load_state, update_state, write_state
from nexus.core.summary import pending_types, summarize_results
from nexus.models.plan import StateResult
from nexus.models.reports import GraphReport, LifecycleReport, StatusReport
from nexus.observers.dispatch import observe_plan
from nexus.observers.registry import ObserverRegistry

logger = logging.getLogger(__name__)

LIFECYCLE_MODES = ("dev", "sync")


class ReconciliationEngine:
    """Runs the observe/diff/persist lifecycle against one manifest.

    Parameters
    ----------
    manifest_path:
        Manifest to load. Defaults to ``config.manifest``.
    state_path:
        Persisted state file. Defaults to ``config.state_path``.
    registry:
        Observer table. Defaults to the built-ins, plus installed
        ``nexus.observers`` entry points when enabled in config.
    config:
        Runtime configuration. Uses environment-driven defaults if omitted.
    """

    def __init__(
        self,
        manifest_path: Path | str | None = None,
        state_path: Path | str | None = None,
        *,
        registry: ObserverRegistry | None = None,
        config: NexusConfig | None = None,
    ) -> None:
        self.config = config or NexusConfig()
        self.manifest_path = Path(manifest_path or self.config.manifest)
        self.state_path = Path(state_path or self.config.state_path)
        if registry is None:
            registry = ObserverRegistry.with_builtins(self.config.probe_timeout_seconds)
            if self.config.load_installed_observers:
                registry.load_installed()
        self.registry = registry

    # ------------------------------------------------------------------
    # Flows
    # ------------------------------------------------------------------

    def load(self) -> LoadedManifest:
        """Load the manifest and register any observers it declares."""
        loaded = load_manifest(self.manifest_path)
        self.registry.load_manifest_plugins(loaded.manifest.plugins)
        return loaded

    def graph(self) -> GraphReport:
        """Derive the service dependency graph."""
        loaded = load_manifest(self.manifest_path)
        return GraphReport(manifest=loaded.manifest_path, edges=build_graph(loaded.manifest))

    def status(self, intent: str | None = None) -> StatusReport:
        """Observe the intent and compare with persisted state; never writes."""
        loaded = self.load()
        intent_name, results = self._observe(loaded, intent)
        state = load_state(self.state_path)
        return StatusReport(
            manifest=loaded.manifest_path,
            intent=intent_name,
            manifest_hash=loaded.manifest_hash,
            state_path=self.state_path,
            state_hash=state.manifest_hash,
            state_stale=is_stale(state, loaded.manifest_hash),
            summary=summarize_results(results),
            results=results,
        )

    def sync(self, intent: str | None = None, mode: str = "sync") -> LifecycleReport:
        """Observe the intent and replace persisted state with the results.

        Always revalidates, even when the manifest hash is unchanged.
        """
        if mode not in LIFECYCLE_MODES:
            raise ValueError(f"Unknown lifecycle mode: {mode}")
        loaded = self.load()
        intent_name, results = self._observe(loaded, intent)
        previous = load_state(self.state_path)
        if is_stale(previous, loaded.manifest_hash):
            logger.info("Manifest changed since last %s; state was stale", mode)
        next_state = update_state(previous, results, loaded.manifest_hash)
        write_state(next_state, self.state_path)
        summary = summarize_results(results)
        logger.info(
            "%s (intent %s): %d healthy, %d missing, %d unknown",
            mode,
            intent_name,
            summary.healthy,
            summary.missing,
            summary.unknown,
        )
        return LifecycleReport(
            mode=mode,
            intent=intent_name,
            summary=summary,
            results=results,
            state_path=self.state_path,
            pending_types=pending_types(results),
        )

    def dev(self, intent: str | None = None) -> LifecycleReport:
        return self.sync(intent, mode="dev")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _observe(
        self, loaded: LoadedManifest, intent: str | None
    ) -> tuple[str, list[StateResult]]:
        intent_name = resolve_intent_name(loaded.manifest, intent)
        plan = build_plan(loaded.manifest, intent_name)
        results = observe_plan(
            plan,
            loaded.project_root,
            self.registry,
            max_workers=self.config.max_parallel_observers,
        )
        return intent_name, results
