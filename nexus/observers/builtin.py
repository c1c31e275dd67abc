"""Built-in observers shipped with Nexus.

Each class handles one state ``type``:

* ``package.deps`` — lockfile presence and checksum.
* ``db.schema`` — schema source presence and checksum.
* ``env.export`` — a non-empty exported key list.
* ``env.inherit`` — a declared ``from`` service.
* ``process.http`` — raw TCP liveness of a local port.
"""

from __future__ import annotations

import logging
import math
import socket
from pathlib import Path
from typing import Any

from nexus.core.hasher import file_checksum
from nexus.models.plan import Observation

logger = logging.getLogger(__name__)

DEFAULT_LOCKFILE = "package-lock.json"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PROBE_TIMEOUT = 0.3


class PackageDepsObserver:
    """``package.deps`` — healthy when the service lockfile exists."""

    def observe(
        self, config: dict[str, Any], service_root: Path, project_root: Path
    ) -> Observation:
        lockfile = config.get("lockfile") or DEFAULT_LOCKFILE
        lockfile_path = service_root / str(lockfile)
        if not lockfile_path.is_file():
            return Observation.missing(lockfile=str(lockfile_path), exists=False)
        return Observation.healthy(
            lockfile=str(lockfile_path),
            checksum=file_checksum(lockfile_path),
        )


class DbSchemaObserver:
    """``db.schema`` — healthy when the declared schema source exists.

    No ``source`` at all is ``unknown``, not ``missing``.
    """

    def observe(
        self, config: dict[str, Any], service_root: Path, project_root: Path
    ) -> Observation:
        source = config.get("source")
        if not source:
            return Observation.unknown(reason="no source defined")
        schema_path = (service_root / str(source)).resolve()
        if not schema_path.is_file():
            return Observation.missing(source=str(schema_path), exists=False)
        return Observation.healthy(
            source=str(schema_path),
            exists=True,
            checksum=file_checksum(schema_path),
        )


class EnvExportObserver:
    """``env.export`` — healthy when ``keys`` lists at least one variable."""

    def observe(
        self, config: dict[str, Any], service_root: Path, project_root: Path
    ) -> Observation:
        keys = config.get("keys")
        keys = list(keys) if isinstance(keys, list) else []
        if keys:
            return Observation.healthy(keys=keys)
        return Observation.missing(keys=keys)


class EnvInheritObserver:
    """``env.inherit`` — healthy when a ``from`` service is declared."""

    def observe(
        self, config: dict[str, Any], service_root: Path, project_root: Path
    ) -> Observation:
        source = config.get("from")
        if source:
            return Observation.healthy(**{"from": source})
        return Observation.missing(**{"from": source})


def parse_port(value: Any) -> int | None:
    """Coerce a configured port to an int, or ``None`` when it is not one.

    Numeric strings are accepted; booleans, non-finite and out-of-range
    values are not.
    """
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    port = int(number)
    if not 0 <= port <= 65535:
        return None
    return port


def check_port(host: str, port: int, timeout: float) -> bool:
    """Return True iff a TCP connection to ``host:port`` opens within *timeout*.

    Connects and closes without sending any bytes. Timeouts and connection
    errors both return False.
    """
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError as exc:
        logger.debug("Probe %s:%s failed: %s", host, port, exc)
        return False


class ProcessHttpObserver:
    """``process.http`` — healthy when something accepts TCP on the port.

    This is a liveness check only; no HTTP request is made.

    Parameters
    ----------
    timeout:
        Connect timeout in seconds.
    """

    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT) -> None:
        self.timeout = timeout

    def observe(
        self, config: dict[str, Any], service_root: Path, project_root: Path
    ) -> Observation:
        port = parse_port(config.get("port"))
        host = str(config.get("host") or DEFAULT_HOST)
        if port is None:
            return Observation.unknown(reason="invalid port")
        is_open = check_port(host, port, self.timeout)
        evidence = {"host": host, "port": port, "open": is_open}
        if is_open:
            return Observation.healthy(**evidence)
        return Observation.missing(**evidence)


def builtin_observers(probe_timeout: float = DEFAULT_PROBE_TIMEOUT) -> dict[str, Any]:
    """Return the built-in ``type -> observer`` table."""
    return {
        "package.deps": PackageDepsObserver(),
        "db.schema": DbSchemaObserver(),
        "env.export": EnvExportObserver(),
        "env.inherit": EnvInheritObserver(),
        "process.http": ProcessHttpObserver(timeout=probe_timeout),
    }
