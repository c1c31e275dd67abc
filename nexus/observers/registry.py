"""Observer registry — routes each plan item to the observer for its type.

The registry is populated at process start with the built-in observers and
extended with external ones from three sources:

* direct :meth:`ObserverRegistry.register` calls,
* the manifest ``plugins`` section (``{type, entry_point}`` entries), and
* installed distributions exposing the ``nexus.observers`` entry-point group.

An ``entry_point`` is a ``"package.module:attribute"`` string. The attribute
is either an observer instance or a zero-argument callable (usually a
class) returning one.
"""

from __future__ import annotations

import importlib
import logging
from importlib.metadata import entry_points
from pathlib import Path
from typing import Any

from pydantic_core import PydanticSerializationError, to_jsonable_python

from nexus.core.errors import ObserverError, PluginLoadError
from nexus.models.plan import Observation, PlanItem
from nexus.observers.base import Observer
from nexus.observers.builtin import DEFAULT_PROBE_TIMEOUT, builtin_observers

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "nexus.observers"


def resolve_entry_point(entry_point: str) -> Observer:
    """Import ``module:attr`` and return the observer it names.

    Raises
    ------
    PluginLoadError
        If the module or attribute cannot be imported, or the result does
        not satisfy the :class:`Observer` protocol.
    """
    module_name, sep, attr_path = entry_point.partition(":")
    if not sep or not module_name or not attr_path:
        raise PluginLoadError(
            f"Invalid entry point '{entry_point}': expected 'module:attribute'"
        )
    try:
        target: Any = importlib.import_module(module_name)
        for part in attr_path.split("."):
            target = getattr(target, part)
    except (ImportError, AttributeError) as exc:
        raise PluginLoadError(f"Cannot import observer '{entry_point}': {exc}") from exc
    return _as_observer(target, entry_point)


def _as_observer(target: Any, label: str) -> Observer:
    if isinstance(target, Observer) and not isinstance(target, type):
        return target
    if callable(target):
        try:
            instance = target()
        except Exception as exc:
            raise PluginLoadError(f"Cannot construct observer '{label}': {exc}") from exc
        if isinstance(instance, Observer):
            return instance
    raise PluginLoadError(f"'{label}' does not provide an observe() method")


class ObserverRegistry:
    """Table of ``type -> Observer`` with dispatch.

    Parameters
    ----------
    observers:
        Initial table. Use :meth:`with_builtins` for the standard set.

    Examples
    --------
    >>> registry = ObserverRegistry.with_builtins()
    >>> "package.deps" in registry
    True
    """

    def __init__(self, observers: dict[str, Observer] | None = None) -> None:
        self._observers: dict[str, Observer] = {}
        for type_name, observer in (observers or {}).items():
            self.register(type_name, observer)

    @classmethod
    def with_builtins(cls, probe_timeout: float = DEFAULT_PROBE_TIMEOUT) -> ObserverRegistry:
        """Return a registry holding the built-in observers."""
        return cls(builtin_observers(probe_timeout))

    # -- Registration -------------------------------------------------------

    def register(self, type_name: str, observer: Observer) -> None:
        """Register *observer* for *type_name*, replacing any previous one.

        Raises
        ------
        TypeError
            If *observer* has no ``observe`` method.
        """
        if not type_name:
            raise ValueError("Observer type must be a non-empty string")
        if not isinstance(observer, Observer):
            raise TypeError(f"Observer for '{type_name}' must define observe()")
        if type_name in self._observers:
            logger.info("Replacing observer for type '%s'", type_name)
        self._observers[type_name] = observer
        logger.debug("Registered observer for type '%s'", type_name)

    def unregister(self, type_name: str) -> bool:
        """Remove the observer for *type_name*; return whether one existed."""
        if self._observers.pop(type_name, None) is None:
            return False
        logger.info("Unregistered observer for type '%s'", type_name)
        return True

    def load_entry_point(self, type_name: str, entry_point: str) -> Observer:
        """Import ``module:attr`` and register it for *type_name*."""
        observer = resolve_entry_point(entry_point)
        self.register(type_name, observer)
        logger.info("Loaded observer '%s' from %s", type_name, entry_point)
        return observer

    def load_manifest_plugins(self, plugins: Any) -> list[str]:
        """Register observers declared in a manifest ``plugins`` section.

        Accepts a list of ``{type, entry_point}`` mappings or a single
        ``{type: entry_point}`` mapping. Returns the registered type names.

        Raises
        ------
        PluginLoadError
            If an entry is malformed or cannot be loaded.
        """
        if not plugins:
            return []
        if isinstance(plugins, dict):
            entries = [{"type": k, "entry_point": v} for k, v in plugins.items()]
        elif isinstance(plugins, list):
            entries = plugins
        else:
            raise PluginLoadError("Invalid plugins section: expected a list or mapping")

        loaded: list[str] = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise PluginLoadError(f"Invalid plugin entry: {entry!r}")
            type_name = entry.get("type")
            entry_point = entry.get("entry_point") or entry.get("entryPoint")
            if not isinstance(type_name, str) or not isinstance(entry_point, str) or not type_name:
                raise PluginLoadError(
                    f"Plugin entry needs non-empty 'type' and string 'entry_point': {entry!r}"
                )
            self.load_entry_point(type_name, entry_point)
            loaded.append(type_name)
        return loaded

    def load_installed(self, group: str = ENTRY_POINT_GROUP) -> list[str]:
        """Register observers advertised by installed distributions.

        A broken installed plugin is logged and skipped so it cannot block
        every invocation.
        """
        loaded: list[str] = []
        for ep in entry_points(group=group):
            try:
                observer = _as_observer(ep.load(), ep.value)
            except Exception:
                logger.exception("Failed to load installed observer '%s' (%s)", ep.name, ep.value)
                continue
            self.register(ep.name, observer)
            loaded.append(ep.name)
        if loaded:
            logger.info("Loaded %d installed observer(s): %s", len(loaded), ", ".join(loaded))
        return loaded

    # -- Lookup -------------------------------------------------------------

    def get(self, type_name: str) -> Observer | None:
        return self._observers.get(type_name)

    @property
    def types(self) -> list[str]:
        """Registered type names, sorted."""
        return sorted(self._observers)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._observers

    def __len__(self) -> int:
        return len(self._observers)

    # -- Dispatch -----------------------------------------------------------

    def observe(self, item: PlanItem, project_root: Path) -> Observation:
        """Observe one plan item.

        Never raises for non-compliance: an unregistered type, an observer
        that raises, or evidence that cannot be persisted as JSON yields
        ``unknown`` with the cause as evidence.
        """
        service_root = (Path(project_root) / item.service.root).resolve()
        observer = self._observers.get(item.type)
        if observer is None:
            logger.debug("No observer registered for type '%s' (%s)", item.type, item.key)
            return Observation.unknown(type=item.type)
        try:
            observation = observer.observe(dict(item.config), service_root, Path(project_root))
        except ObserverError as exc:
            logger.warning("Observer '%s' rejected config for %s: %s", item.type, item.key, exc)
            return Observation.unknown(type=item.type, error=str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Observer '%s' failed for %s", item.type, item.key)
            return Observation.unknown(type=item.type, error=f"{type(exc).__name__}: {exc}")
        if not isinstance(observation, Observation):
            logger.warning(
                "Observer '%s' returned %s for %s, expected Observation",
                item.type,
                type(observation).__name__,
                item.key,
            )
            return Observation.unknown(type=item.type, error="observer returned no Observation")
        try:
            to_jsonable_python(observation.evidence)
        except PydanticSerializationError as exc:
            logger.warning(
                "Observer '%s' returned unserializable evidence for %s: %s", item.type, item.key, exc
            )
            return Observation.unknown(type=item.type, error=f"unserializable evidence: {exc}")
        return observation
