"""Observer protocol — the capability boundary for state types.

Any object with an ``observe(config, service_root, project_root)`` method
returning an :class:`~nexus.models.plan.Observation` satisfies it. Observers
only read: they never install, migrate or otherwise mutate the system.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from nexus.models.plan import Observation


@runtime_checkable
class Observer(Protocol):
    """Protocol for state observers.

    Observers return ``missing`` when a state is not yet satisfied and raise
    :class:`~nexus.core.errors.ObserverError` only for malformed
    configuration.
    """

    def observe(
        self,
        config: dict[str, Any],
        service_root: Path,
        project_root: Path,
    ) -> Observation:
        """Observe one state.

        Parameters
        ----------
        config:
            The state's configuration bag, ``type`` included.
        service_root:
            The service's ``root`` resolved against the project root.
        project_root:
            Directory containing the manifest.
        """
        ...
