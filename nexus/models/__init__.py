"""Nexus data models — all Pydantic v2, all frozen (immutable)."""

from nexus.models.graph import GraphEdge
from nexus.models.manifest import (
    Desired,
    DesiredService,
    EnvBinding,
    EnvSection,
    Intent,
    Manifest,
    Requires,
    Service,
    StateDef,
)
from nexus.models.plan import (
    Observation,
    ObservationStatus,
    PlanItem,
    StateResult,
    Summary,
)
from nexus.models.reports import GraphReport, LifecycleReport, StatusReport
from nexus.models.state import ObservationRecord, PersistedState

__all__ = [
    # manifest
    "Manifest",
    "Service",
    "StateDef",
    "Intent",
    "Desired",
    "DesiredService",
    "Requires",
    "EnvSection",
    "EnvBinding",
    # plan
    "PlanItem",
    "Observation",
    "ObservationStatus",
    "StateResult",
    "Summary",
    # graph
    "GraphEdge",
    # state
    "ObservationRecord",
    "PersistedState",
    # reports
    "GraphReport",
    "StatusReport",
    "LifecycleReport",
]
