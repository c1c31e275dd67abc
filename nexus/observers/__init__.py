"""Observers — read-only capability implementations keyed by state type.

External observers plug in through :class:`ObserverRegistry`, either by
manifest ``plugins`` entries or the ``nexus.observers`` entry-point group.
"""

from nexus.observers.base import Observer
from nexus.observers.dispatch import observe_plan
from nexus.observers.registry import ObserverRegistry, resolve_entry_point

__all__ = ["Observer", "ObserverRegistry", "observe_plan", "resolve_entry_point"]
