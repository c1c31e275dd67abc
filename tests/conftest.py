"""Shared test fixtures for Nexus."""

from __future__ import annotations

import socket
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from nexus.core.manifest_loader import LoadedManifest, load_manifest
from nexus.models.manifest import Manifest
from nexus.observers.registry import ObserverRegistry

SAMPLE_MANIFEST = textwrap.dedent(
    """\
    version: "1"
    project: shop
    context:
      owner: platform
    policies:
      drift: warn
    intents:
      feature:
        scope:
          services: [api, web]
        desired:
          services:
            api:
              states: [deps, schema, env]
            web:
              states: [deps, inherit]
      backend:
        desired:
          services:
            api:
              states: [deps]
    services:
      api:
        root: api
        type: node
        provides:
          env:
            API_URL:
              value: http://localhost:4001
        states:
          deps:
            type: package.deps
          schema:
            type: db.schema
            source: db/schema.sql
          env:
            type: env.export
            keys: [API_URL]
          http:
            type: process.http
            port: 4001
      web:
        root: web
        type: node
        requires:
          services: [api]
        consumes:
          env:
            API_URL:
              from: api.API_URL
            API_TOKEN:
              from: api.API_TOKEN
        states:
          deps:
            type: package.deps
            lockfile: yarn.lock
          inherit:
            type: env.inherit
            from: api
    """
)


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write manifest text to ``tmp_path/<name>`` and return its path."""

    def _factory(text: str, name: str = "nexus.yaml") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return _factory


@pytest.fixture
def project(tmp_path: Path, write_manifest: Callable[..., Path]) -> Path:
    """A sample project: api has its lockfile and schema, web lacks ``yarn.lock``.

    Returns the manifest path.
    """
    (tmp_path / "api" / "db").mkdir(parents=True)
    (tmp_path / "web").mkdir()
    (tmp_path / "api" / "package-lock.json").write_text('{"lockfileVersion": 3}\n')
    (tmp_path / "api" / "db" / "schema.sql").write_text("CREATE TABLE orders (id INT);\n")
    return write_manifest(SAMPLE_MANIFEST)


@pytest.fixture
def loaded(project: Path) -> LoadedManifest:
    """The sample project's manifest, loaded."""
    return load_manifest(project)


@pytest.fixture
def manifest(loaded: LoadedManifest) -> Manifest:
    return loaded.manifest


@pytest.fixture
def registry() -> ObserverRegistry:
    """Built-in observers with a short probe timeout."""
    return ObserverRegistry.with_builtins(probe_timeout=0.3)


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / ".nexus" / "state.json"


@pytest.fixture
def listening_port() -> Iterator[int]:
    """A loopback port with a bound, listening socket."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(8)
    try:
        yield server.getsockname()[1]
    finally:
        server.close()


@pytest.fixture
def closed_port() -> int:
    """A loopback port with nothing listening on it."""
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port
