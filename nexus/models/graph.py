"""Dependency graph edge model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

REQUIRES_REASON = "requires"


class GraphEdge(BaseModel):
    """A directed edge ``from -> to`` with the declaration that produced it.

    ``reason`` is ``requires`` or ``consumes <VAR_NAME>``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    reason: str

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.from_, self.to, self.reason)

    def to_report(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)

    def __str__(self) -> str:
        return f"{self.from_} -> {self.to} ({self.reason})"
