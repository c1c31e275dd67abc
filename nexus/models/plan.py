"""Plan and observation models — the per-(service, state) unit of work."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from nexus.models.manifest import Service


class ObservationStatus(str, Enum):
    """Outcome of observing one desired state.

    ``unknown`` means the observer could not decide (e.g. malformed
    configuration) and is never the same as ``missing``.
    """

    HEALTHY = "healthy"
    MISSING = "missing"
    UNKNOWN = "unknown"


class PlanItem(BaseModel):
    """One (service, state) obligation expanded from an intent."""

    model_config = ConfigDict(frozen=True)

    service_name: str
    state_id: str
    type: str
    config: dict[str, Any] = Field(default_factory=dict)
    service: Service = Field(default_factory=Service)

    @property
    def key(self) -> str:
        """Persisted-state key, ``<service>:<state>``."""
        return f"{self.service_name}:{self.state_id}"


class Observation(BaseModel):
    """Status plus observer-specific evidence for one plan item."""

    model_config = ConfigDict(frozen=True)

    status: ObservationStatus
    evidence: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def healthy(cls, **evidence: Any) -> Observation:
        return cls(status=ObservationStatus.HEALTHY, evidence=evidence)

    @classmethod
    def missing(cls, **evidence: Any) -> Observation:
        return cls(status=ObservationStatus.MISSING, evidence=evidence)

    @classmethod
    def unknown(cls, **evidence: Any) -> Observation:
        return cls(status=ObservationStatus.UNKNOWN, evidence=evidence)


class StateResult(BaseModel):
    """A plan item paired with its observation."""

    model_config = ConfigDict(frozen=True)

    item: PlanItem
    observation: Observation

    @property
    def key(self) -> str:
        return self.item.key

    def to_report(self) -> dict[str, Any]:
        """JSON shape used by ``--json`` output."""
        return {
            "service": self.item.service_name,
            "state": self.item.state_id,
            "type": self.item.type,
            "status": self.observation.status.value,
            "evidence": self.observation.evidence,
        }


class Summary(BaseModel):
    """Aggregate counts over a set of observations."""

    model_config = ConfigDict(frozen=True)

    healthy: int = 0
    missing: int = 0
    unknown: int = 0
    total: int = 0

    @property
    def compliant(self) -> bool:
        """True iff nothing is missing or unknown."""
        return self.missing == 0 and self.unknown == 0

    @property
    def pending(self) -> int:
        return self.missing + self.unknown
