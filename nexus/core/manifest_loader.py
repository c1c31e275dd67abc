"""Manifest loader — parse ``nexus.yaml`` and hash its raw source.

The hash covers the exact bytes on disk, so any edit (including comments
and whitespace) marks previously persisted state as stale.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from nexus.core.errors import (
    ManifestNotFoundError,
    ManifestParseError,
    ManifestSchemaError,
)
from nexus.core.hasher import content_hash
from nexus.models.manifest import Manifest

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("services", "intents")


class LoadedManifest(BaseModel):
    """A parsed manifest plus the paths and hash derived from its source."""

    model_config = ConfigDict(frozen=True)

    manifest: Manifest
    manifest_path: Path
    project_root: Path
    manifest_hash: str


def load_manifest(manifest_path: Path | str) -> LoadedManifest:
    """Load and validate a manifest document.

    Parameters
    ----------
    manifest_path:
        Path to a YAML or JSON manifest, absolute or relative to the cwd.

    Returns
    -------
    LoadedManifest
        The parsed manifest, its absolute path, the directory used to
        resolve service roots, and ``sha256:<hex>`` of the raw bytes.

    Raises
    ------
    ManifestNotFoundError
        If the path does not resolve to a readable file.
    ManifestParseError
        If the document is not well-formed or is not a mapping.
    ManifestSchemaError
        If ``services`` or ``intents`` is missing or mis-shaped.
    """
    path = Path(manifest_path).resolve()
    if not path.is_file():
        raise ManifestNotFoundError(f"Manifest not found: {manifest_path}")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ManifestNotFoundError(f"Manifest not readable: {manifest_path}: {exc}") from exc

    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ManifestParseError(f"Invalid manifest: {exc}") from exc

    if not isinstance(document, dict):
        raise ManifestParseError("Invalid manifest: expected a YAML object")

    missing = [section for section in REQUIRED_SECTIONS if document.get(section) is None]
    if missing:
        raise ManifestSchemaError(
            f"Invalid manifest: missing {' and '.join(missing)}"
        )

    try:
        manifest = Manifest.model_validate(document)
    except ValidationError as exc:
        raise ManifestSchemaError(f"Invalid manifest: {exc}") from exc

    manifest_hash = content_hash(raw)
    logger.debug(
        "Loaded manifest %s (%d services, %d intents, %s)",
        path,
        len(manifest.services),
        len(manifest.intents),
        manifest_hash,
    )
    return LoadedManifest(
        manifest=manifest,
        manifest_path=path,
        project_root=path.parent,
        manifest_hash=manifest_hash,
    )
