"""Report models — the complete output surface of the engine.

The CLI renders these with Rich or dumps them as JSON; the engine never
formats text itself.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from nexus.models.graph import GraphEdge
from nexus.models.plan import StateResult, Summary


class GraphReport(BaseModel):
    """Output of ``nexus graph``."""

    model_config = ConfigDict(frozen=True)

    manifest: Path
    edges: list[GraphEdge] = Field(default_factory=list)

    def to_report(self) -> dict[str, Any]:
        return {"edges": [edge.to_report() for edge in self.edges]}


class StatusReport(BaseModel):
    """Output of ``nexus status`` — observe only, never persisted."""

    model_config = ConfigDict(frozen=True)

    manifest: Path
    intent: str
    manifest_hash: str
    state_path: Path
    state_hash: str | None = None
    state_stale: bool = False
    summary: Summary
    results: list[StateResult] = Field(default_factory=list)

    def to_report(self) -> dict[str, Any]:
        return {
            "manifest": str(self.manifest),
            "intent": self.intent,
            "manifestHash": self.manifest_hash,
            "stateHash": self.state_hash,
            "stateStale": self.state_stale,
            "summary": self.summary.model_dump(),
            "results": [result.to_report() for result in self.results],
        }


class LifecycleReport(BaseModel):
    """Output of ``nexus dev`` / ``nexus sync`` — observed and persisted."""

    model_config = ConfigDict(frozen=True)

    mode: str
    intent: str
    summary: Summary
    results: list[StateResult] = Field(default_factory=list)
    state_path: Path
    pending_types: list[str] = Field(default_factory=list)

    def to_report(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "intent": self.intent,
            "summary": self.summary.model_dump(),
            "results": [result.to_report() for result in self.results],
            "state": str(self.state_path),
        }
