"""Diff and summary over a set of observations."""

from __future__ import annotations

from nexus.models.plan import ObservationStatus, StateResult, Summary


def summarize_results(results: list[StateResult]) -> Summary:
    """Count healthy, missing and unknown results.

    Any status other than healthy or missing counts as unknown.
    """
    healthy = missing = unknown = 0
    for result in results:
        status = result.observation.status
        if status == ObservationStatus.HEALTHY:
            healthy += 1
        elif status == ObservationStatus.MISSING:
            missing += 1
        else:
            unknown += 1
    return Summary(healthy=healthy, missing=missing, unknown=unknown, total=len(results))


def pending_types(results: list[StateResult]) -> list[str]:
    """Sorted unique state types that are not healthy."""
    return sorted(
        {r.item.type for r in results if r.observation.status != ObservationStatus.HEALTHY}
    )
