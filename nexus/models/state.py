"""Persisted state models — the durable record written to ``.nexus/state.json``.

Serialized with camelCase keys (``manifestHash``, ``lastValidatedAt``,
``lastAppliedAt``) so the file format is stable across implementations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from nexus.models.plan import ObservationStatus


class ObservationRecord(BaseModel):
    """Last-known observation of one ``<service>:<state>`` key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: ObservationStatus
    evidence: dict[str, Any] = Field(default_factory=dict)
    last_validated_at: datetime | None = Field(default=None, alias="lastValidatedAt")
    last_applied_at: datetime | None = Field(default=None, alias="lastAppliedAt")


class PersistedState(BaseModel):
    """Observation set keyed by ``<service>:<state>`` for one manifest hash.

    Replaced wholesale on every ``dev`` / ``sync``; keys absent from the
    current plan are dropped.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    manifest_hash: str | None = Field(default=None, alias="manifestHash")
    observations: dict[str, ObservationRecord] = Field(default_factory=dict)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
