"""Error taxonomy for the reconciliation core.

Every error here is a configuration-correctness failure and is fatal to
the current invocation. Compliance gaps (``missing`` / ``unknown``) are
observations, never exceptions.
"""

from __future__ import annotations


class NexusError(RuntimeError):
    """Base class for all fatal Nexus errors."""


# ---------------------------------------------------------------------------
# Manifest loading
# ---------------------------------------------------------------------------


class ManifestNotFoundError(NexusError):
    """Raised when the manifest path does not resolve to a readable file."""


class ManifestParseError(NexusError):
    """Raised when the manifest is not a well-formed YAML/JSON object."""


class ManifestSchemaError(NexusError):
    """Raised when required manifest sections are absent or mis-shaped."""


# ---------------------------------------------------------------------------
# Plan resolution
# ---------------------------------------------------------------------------


class IntentNotFoundError(NexusError):
    """Raised when a named intent is absent or declares no desired services."""


class NoIntentsError(NexusError):
    """Raised when no intent is named and the manifest defines none."""


class ServiceNotFoundError(NexusError):
    """Raised when an intent references an undeclared service."""


class StateNotFoundError(NexusError):
    """Raised when an intent references an undeclared or untyped state."""


# ---------------------------------------------------------------------------
# Persistence and plugins
# ---------------------------------------------------------------------------


class CorruptStateError(NexusError):
    """Raised when the persisted state file cannot be read as state JSON."""


class PluginLoadError(NexusError):
    """Raised when an external observer cannot be imported or is not an Observer."""


class ObserverError(ValueError):
    """Raised by an observer when its state configuration is malformed.

    Dispatch converts this into an ``unknown`` observation; it never
    reaches the CLI boundary.
    """
