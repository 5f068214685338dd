"""Per-domain verdict aggregation.

Pure functions only: the verdict depends on the IP results and the mode,
nothing else, so runs can be replayed from saved results.
"""

from __future__ import annotations

from typing import Sequence

from core.domain.models import DomainResult, IPCheckResult, SummaryTag


def matches(label: str | None, prefixes: Sequence[str]) -> bool:
    """True when `label` starts with any expected prefix (case-sensitive)."""

    if label is None:
        return False
    return any(label.startswith(prefix) for prefix in prefixes)


def ip_matches(result: IPCheckResult, prefixes: Sequence[str]) -> bool:
    # A failed lookup never matches.
    return result.succeeded and matches(result.label, prefixes)


def aggregate(
    domain: str,
    expected_prefixes: Sequence[str],
    ip_results: Sequence[IPCheckResult],
    strict: bool,
) -> DomainResult:
    """Reduce per-IP outcomes into one `DomainResult`.

    - Lenient: clean iff at least one IP matches.
    - Strict: clean iff every IP matches (an empty result set is polluted).
    """

    hits = [ip_matches(r, expected_prefixes) for r in ip_results]

    if strict:
        polluted = not (hits and all(hits))
        summary = SummaryTag.STRICT_POLLUTED if polluted else SummaryTag.STRICT_CLEAN
    else:
        polluted = not any(hits)
        summary = SummaryTag.LENIENT_POLLUTED if polluted else SummaryTag.LENIENT_CLEAN

    return DomainResult(
        domain=domain,
        expected_prefixes=tuple(expected_prefixes),
        ip_results=tuple(ip_results),
        is_polluted=polluted,
        summary=summary,
    )
