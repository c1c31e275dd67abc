"""Plan builder — expand an intent into ordered (service, state) obligations.

Expansion is purely structural: items follow the intent's desired-service
order, then each service's listed state order. Dependency edges are not
consulted.
"""

from __future__ import annotations

import logging

from nexus.core.errors import (
    IntentNotFoundError,
    NoIntentsError,
    ServiceNotFoundError,
    StateNotFoundError,
)
from nexus.models.manifest import Manifest
from nexus.models.plan import PlanItem

logger = logging.getLogger(__name__)

FALLBACK_INTENT = "feature"


def resolve_intent_name(manifest: Manifest, intent_name: str | None = None) -> str:
    """Pick the intent to plan.

    An explicit name must exist. Otherwise: ``defaultIntent`` when it names
    a declared intent, then an intent literally named ``feature``, then the
    first declared intent.

    Raises
    ------
    IntentNotFoundError
        If *intent_name* is given but not declared.
    NoIntentsError
        If no name is given and the manifest declares no intents.
    """
    if intent_name:
        if intent_name not in manifest.intents:
            raise IntentNotFoundError(f"Intent not found: {intent_name}")
        return intent_name
    if manifest.default_intent and manifest.default_intent in manifest.intents:
        return manifest.default_intent
    if FALLBACK_INTENT in manifest.intents:
        return FALLBACK_INTENT
    for name in manifest.intents:
        return name
    raise NoIntentsError("No intents defined in manifest")


def build_plan(manifest: Manifest, intent_name: str) -> list[PlanItem]:
    """Expand *intent_name* into plan items.

    The whole plan is validated before it is returned; a resolution error
    leaves no partial plan behind.

    Raises
    ------
    IntentNotFoundError
        If the intent is undeclared or has no ``desired.services``.
    ServiceNotFoundError
        If a desired service is not declared under ``services``.
    StateNotFoundError
        If a desired state is not declared on its service, or its ``type``
        is absent, empty or not a string.
    """
    intent = manifest.intents.get(intent_name)
    if intent is None or intent.desired is None or intent.desired.services is None:
        raise IntentNotFoundError(f"Intent has no desired services: {intent_name}")

    plan: list[PlanItem] = []
    for service_name, desired in intent.desired.services.items():
        service = manifest.services.get(service_name)
        if service is None:
            raise ServiceNotFoundError(f"Service not found: {service_name}")
        for state_id in desired.states:
            state = service.states.get(state_id)
            if state is None or not isinstance(state.type, str) or not state.type:
                raise StateNotFoundError(f"State not found: {service_name}.{state_id}")
            plan.append(
                PlanItem(
                    service_name=service_name,
                    state_id=state_id,
                    type=state.type,
                    config=state.config,
                    service=service,
                )
            )

    logger.debug("Built plan for intent %s with %d item(s)", intent_name, len(plan))
    return plan
