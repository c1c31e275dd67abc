"""Manifest models — the declarative desired-state document.

Loaded once per run and never mutated. Open-ended sections (state
configuration, ``context``, ``policies``) are carried through without
interpretation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EnvBinding(BaseModel):
    """Source descriptor for a provided or consumed environment variable.

    ``from`` of the shape ``<service>.<VAR>`` names a provider service.
    Scalar bindings (``PORT: 4001``) are kept under ``value``.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    from_: Any = Field(default=None, alias="from")
    value: Any = None

    @model_validator(mode="before")
    @classmethod
    def _wrap_scalar(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        return {"value": data}

    @property
    def provider(self) -> str | None:
        """Provider service name when ``from`` is ``<service>.<VAR>``."""
        if isinstance(self.from_, str) and "." in self.from_:
            return self.from_.split(".")[0]
        return None


class EnvSection(BaseModel):
    """``provides`` / ``consumes`` block: variable name -> binding."""

    model_config = ConfigDict(frozen=True, extra="allow")

    env: dict[str, EnvBinding] = Field(default_factory=dict)

    @field_validator("env", mode="before")
    @classmethod
    def _mapping_or_empty(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


class Requires(BaseModel):
    """Declared dependencies of a service on other services and their states.

    Malformed entries are dropped rather than rejected; only ``services`` feeds
    the dependency graph.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    services: list[str] = Field(default_factory=list)
    states: dict[str, Any] = Field(default_factory=dict)

    @field_validator("services", mode="before")
    @classmethod
    def _services_default(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [name for name in value if isinstance(name, str)]

    @field_validator("states", mode="before")
    @classmethod
    def _states_default(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


class StateDef(BaseModel):
    """A typed desired condition for a service.

    ``type`` selects the observer; every other key is observer-defined
    configuration and is preserved as-is. ``type`` is not checked here: only
    states an intent plans must carry a non-empty string type.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: Any = None

    @property
    def config(self) -> dict[str, Any]:
        """The full configuration bag, ``type`` included."""
        return {"type": self.type, **(self.model_extra or {})}


class Service(BaseModel):
    """A named unit of the developer environment."""

    model_config = ConfigDict(frozen=True, extra="allow")

    root: str = "."
    type: Any = None
    requires: Requires = Field(default_factory=Requires)
    provides: EnvSection = Field(default_factory=EnvSection)
    consumes: EnvSection = Field(default_factory=EnvSection)
    states: dict[str, StateDef | None] = Field(default_factory=dict)

    @field_validator("requires", "provides", "consumes", mode="before")
    @classmethod
    def _mapping_or_default(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @field_validator("states", mode="before")
    @classmethod
    def _states_untyped(cls, value: Any) -> Any:
        # Non-mapping entries (``legacy: package.deps``) are kept as untyped.
        if not isinstance(value, dict):
            return {}
        return {
            state_id: (entry if isinstance(entry, dict) else None)
            for state_id, entry in value.items()
        }

    @field_validator("root", mode="before")
    @classmethod
    def _root_default(cls, value: Any) -> Any:
        return "." if value in (None, "") else str(value)


class DesiredService(BaseModel):
    """The state IDs an intent requires of one service."""

    model_config = ConfigDict(frozen=True, extra="allow")

    states: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, dict) and not isinstance(data.get("states"), list):
            return {**data, "states": []}
        return data


class Desired(BaseModel):
    """``desired`` block of an intent."""

    model_config = ConfigDict(frozen=True, extra="allow")

    services: dict[str, DesiredService] | None = None


class Intent(BaseModel):
    """A named, scoped subset of desired per-service states."""

    model_config = ConfigDict(frozen=True, extra="allow")

    scope: Any = None
    desired: Desired | None = None


class Manifest(BaseModel):
    """The parsed ``nexus.yaml`` document.

    ``services`` and ``intents`` keep their declared order, which drives
    graph edge order and default intent resolution.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    version: Any = None
    project: Any = None
    default_intent: str | None = Field(default=None, alias="defaultIntent")
    services: dict[str, Service]
    intents: dict[str, Intent]
    context: Any = None
    policies: Any = None
    plugins: Any = None
    state: Any = None

    @field_validator("services", "intents", mode="before")
    @classmethod
    def _entries_default(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {name: ({} if entry is None else entry) for name, entry in value.items()}
        return value
