"""State store — last-known observations persisted as JSON.

The file holds the manifest hash of the last ``dev`` / ``sync`` run and one
record per ``<service>:<state>`` key of that run's plan. Each run replaces
the whole observation map; only ``lastAppliedAt`` survives from the
previous record of the same key.

There is no file locking: concurrent invocations against one state file
are not coordinated.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from nexus.core.errors import CorruptStateError
from nexus.models.plan import StateResult
from nexus.models.state import ObservationRecord, PersistedState

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = Path(".nexus/state.json")


def load_state(state_path: Path | str = DEFAULT_STATE_PATH) -> PersistedState:
    """Load persisted state, or an empty state if the file does not exist.

    Raises
    ------
    CorruptStateError
        If the file is not valid JSON or not shaped like persisted state.
    """
    path = Path(state_path).resolve()
    if not path.exists():
        logger.debug("No state file at %s — starting empty", path)
        return PersistedState()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise CorruptStateError(f"Invalid state file: {path}") from exc
    try:
        return PersistedState.model_validate(raw)
    except ValidationError as exc:
        raise CorruptStateError(f"Invalid state file: {path}: {exc}") from exc


def write_state(state: PersistedState, state_path: Path | str = DEFAULT_STATE_PATH) -> Path:
    """Write *state* to *state_path*, creating parent directories.

    The JSON is written to a sibling temp file and moved into place, so
    readers never see a half-written file.

    Returns the absolute path written.
    """
    path = Path(state_path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(state.to_json())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %d observation(s) to %s", len(state.observations), path)
    return path


def update_state(
    previous: PersistedState,
    results: list[StateResult],
    manifest_hash: str,
    *,
    now: datetime | None = None,
) -> PersistedState:
    """Build the next persisted state from this run's results.

    The observation map contains exactly the keys in *results*. For each
    key, ``lastAppliedAt`` is copied from *previous* when the key existed
    there, else ``None``; ``lastValidatedAt`` is stamped with *now* (one
    timestamp for the whole update).
    """
    stamp = now or datetime.now(timezone.utc)
    observations: dict[str, ObservationRecord] = {}
    for result in results:
        prior = previous.observations.get(result.key)
        observations[result.key] = ObservationRecord(
            status=result.observation.status,
            evidence=result.observation.evidence,
            last_validated_at=stamp,
            last_applied_at=prior.last_applied_at if prior is not None else None,
        )
    return PersistedState(manifest_hash=manifest_hash, observations=observations)


def is_stale(state: PersistedState, manifest_hash: str) -> bool:
    """True when *state* was persisted for a different manifest.

    An empty state (no hash yet) is not stale.
    """
    return state.manifest_hash is not None and state.manifest_hash != manifest_hash
