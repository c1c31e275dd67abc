"""Tests for runtime config — env-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from nexus.config import NexusConfig


class TestNexusConfig:
    def test_defaults(self):
        config = NexusConfig()
        assert config.manifest == Path("nexus.yaml")
        assert config.state_path == Path(".nexus/state.json")
        assert config.max_parallel_observers == 8
        assert config.probe_timeout_seconds == 0.3

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("NEXUS_MANIFEST", "envs/dev.yaml")
        monkeypatch.setenv("NEXUS_STATE_PATH", "/tmp/nexus-state.json")
        monkeypatch.setenv("NEXUS_MAX_PARALLEL_OBSERVERS", "2")
        config = NexusConfig()
        assert config.manifest == Path("envs/dev.yaml")
        assert config.state_path == Path("/tmp/nexus-state.json")
        assert config.max_parallel_observers == 2

    def test_parallelism_must_be_positive(self):
        with pytest.raises(ValidationError):
            NexusConfig(max_parallel_observers=0)

    def test_probe_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            NexusConfig(probe_timeout_seconds=0)
