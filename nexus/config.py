"""Runtime configuration — env-driven via pydantic-settings.

Reads from a ``.env`` file and ``NEXUS_*`` environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NexusConfig(BaseSettings):
    """Runtime configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export NEXUS_MANIFEST=services/nexus.yaml
        export NEXUS_STATE_PATH=/tmp/nexus-state.json
        export NEXUS_MAX_PARALLEL_OBSERVERS=1
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NEXUS_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Inputs and persisted state
    manifest: Path = Path("nexus.yaml")
    state_path: Path = Path(".nexus/state.json")

    # Logging
    log_level: str = "WARNING"

    # Observation
    max_parallel_observers: int = Field(default=8, ge=1)
    probe_timeout_seconds: float = Field(default=0.3, gt=0)
    load_installed_observers: bool = True


# Module-level singleton — import as `from nexus.config import config`
config = NexusConfig()
