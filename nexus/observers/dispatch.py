"""Plan observation — run every plan item through the registry.

Items are independent, so they are observed on a bounded thread pool.
Results always come back in plan order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from nexus.models.plan import PlanItem, StateResult
from nexus.observers.registry import ObserverRegistry

logger = logging.getLogger(__name__)


def observe_plan(
    plan: list[PlanItem],
    project_root: Path,
    registry: ObserverRegistry,
    *,
    max_workers: int = 8,
) -> list[StateResult]:
    """Observe each plan item and pair it with its observation.

    Parameters
    ----------
    plan:
        Output of :func:`nexus.core.plan_builder.build_plan`.
    project_root:
        Directory service roots are resolved against.
    registry:
        Observer table used for dispatch.
    max_workers:
        Upper bound on concurrent observations; ``1`` observes sequentially.
    """
    if not plan:
        return []

    def _observe(item: PlanItem) -> StateResult:
        return StateResult(item=item, observation=registry.observe(item, project_root))

    workers = max(1, min(max_workers, len(plan)))
    if workers == 1:
        results = [_observe(item) for item in plan]
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="nexus-observe") as pool:
            results = list(pool.map(_observe, plan))

    logger.debug("Observed %d state(s) with %d worker(s)", len(results), workers)
    return results
