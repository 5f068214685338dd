"""Run-level totals and severity classification."""

from __future__ import annotations

from typing import Iterable

from core.domain.models import DomainResult, PollutionLevel, RunSummary

# Lower-inclusive thresholds, checked from the top.
_LEVEL_THRESHOLDS: tuple[tuple[float, PollutionLevel], ...] = (
    (60.0, PollutionLevel.SEVERE),
    (40.0, PollutionLevel.MODERATE),
    (20.0, PollutionLevel.MILD),
)


def pollution_level(rate: float) -> PollutionLevel:
    for threshold, level in _LEVEL_THRESHOLDS:
        if rate >= threshold:
            return level
    return PollutionLevel.NORMAL


def summarize(results: Iterable[DomainResult]) -> RunSummary:
    """Reduce all domain verdicts into totals and a severity level.

    An empty run has a rate of 0 and level Normal.
    """

    items = list(results)
    total = len(items)
    polluted = sum(1 for r in items if r.is_polluted)
    rate = polluted / total * 100 if total > 0 else 0.0
    return RunSummary(
        total=total,
        polluted_count=polluted,
        pollution_rate=rate,
        level=pollution_level(rate),
    )
