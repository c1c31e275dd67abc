"""Nexus: declarative reconciliation engine for local developer environments.

A ``nexus.yaml`` manifest declares per-service states (dependency sync,
schema alignment, environment export, process liveness). Nexus observes
whether each state already holds, reports a deterministic diff, and
persists the observation set keyed by the manifest hash.
"""

__version__ = "0.1.0"
__description__ = "Declarative desired-state reconciliation for developer environments"

from nexus.core.engine import ReconciliationEngine
from nexus.observers.registry import ObserverRegistry

__all__ = ["ReconciliationEngine", "ObserverRegistry", "__version__"]
