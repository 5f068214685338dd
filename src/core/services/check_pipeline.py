"""Domain checking orchestration.

This module owns the fan-out/fan-in of a run: one task per domain, bounded
by a semaphore, joined before the result set is final. The CLI only supplies
options and optional hooks, which keeps side-effects (printing, progress
bars) out of the core logic and makes the pipeline reusable from tests or
batch jobs.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Sequence

from loguru import logger

from adapters.dns_resolver import SystemResolver
from adapters.ownership_client import OwnershipLookupClient
from core.config import CheckOptions
from core.domain.errors import AllEndpointsExhausted, ResolutionFailure
from core.domain.models import (
    CheckRun,
    DomainResult,
    DomainSpec,
    FailureInfo,
    FailureKind,
    IPCheckResult,
    SummaryTag,
)
from core.interfaces.probes import DomainResolver, OwnershipLookup
from core.services.aggregator import aggregate
from core.services.rate_limiter import build_rate_limiter
from core.services.run_summary import summarize


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress)."""

    domain_started: Callable[[DomainSpec], None] | None = None
    domain_done: Callable[[DomainResult], None] | None = None


def resolution_failed(spec: DomainSpec, error: ResolutionFailure) -> DomainResult:
    """An unresolvable name under a possibly tampered path counts as polluted."""

    return DomainResult(
        domain=spec.name,
        expected_prefixes=spec.expected_prefixes,
        ip_results=(),
        is_polluted=True,
        summary=SummaryTag.NO_IPV4 if error.no_ipv4 else SummaryTag.RESOLUTION_FAILED,
        detail=error.reason,
    )


async def check_domain(
    spec: DomainSpec,
    *,
    resolver: DomainResolver,
    lookup: OwnershipLookup,
    strict: bool,
) -> DomainResult:
    """Resolve one domain, look up each IP in order, aggregate the verdict."""

    try:
        ips = await resolver.resolve(spec.name)
    except ResolutionFailure as exc:
        logger.warning(f"{spec.name}: {exc.reason}")
        return resolution_failed(spec, exc)
    except Exception as exc:
        logger.exception(f"{spec.name}: resolver raised unexpectedly")
        return resolution_failed(spec, ResolutionFailure(spec.name, f"unexpected error: {exc!r}"))

    ip_results: list[IPCheckResult] = []
    for ip in ips:
        try:
            label = await lookup.lookup(ip)
        except AllEndpointsExhausted as exc:
            ip_results.append(IPCheckResult(ip=ip, failure=exc.to_info()))
            continue
        except Exception as exc:
            logger.exception(f"{spec.name}: lookup of {ip} raised unexpectedly")
            failure = FailureInfo(kind=FailureKind.INTERNAL, message=f"unexpected error: {exc!r}")
            ip_results.append(IPCheckResult(ip=ip, failure=failure))
            continue
        ip_results.append(IPCheckResult(ip=ip, label=label))

    result = aggregate(spec.name, spec.expected_prefixes, ip_results, strict)
    logger.info(
        f"{spec.name}: {'POLLUTED' if result.is_polluted else 'clean'} "
        f"({result.summary.value}, {len(ip_results)} IPs)"
    )
    return result


async def run_checks(
    domains: Sequence[DomainSpec],
    *,
    options: CheckOptions,
    resolver: DomainResolver,
    lookup: OwnershipLookup,
    hooks: PipelineHooks | None = None,
) -> list[DomainResult]:
    """Check every domain with at most `options.concurrency` in flight.

    Results come back in completion order, not input order. The call returns
    only once every domain task has finished.
    """

    hooks = hooks or PipelineHooks()
    sem = asyncio.Semaphore(max(1, options.concurrency))

    async def check_one(spec: DomainSpec) -> DomainResult:
        async with sem:
            if hooks.domain_started:
                hooks.domain_started(spec)
            return await check_domain(
                spec,
                resolver=resolver,
                lookup=lookup,
                strict=options.strict,
            )

    logger.info(
        f"Checking {len(domains)} domains | concurrency={options.concurrency} | "
        f"mode={'strict' if options.strict else 'lenient'}"
    )

    tasks = [asyncio.create_task(check_one(spec)) for spec in domains]
    results: list[DomainResult] = []
    try:
        for finished in asyncio.as_completed(tasks):
            result = await finished
            results.append(result)
            if hooks.domain_done:
                hooks.domain_done(result)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
    return results


async def execute(
    domains: Sequence[DomainSpec],
    options: CheckOptions,
    *,
    hooks: PipelineHooks | None = None,
    resolver: DomainResolver | None = None,
    lookup: OwnershipLookup | None = None,
) -> CheckRun:
    """Run a full check with the production probes unless fakes are injected."""

    resolver = resolver or SystemResolver(timeout=options.timeout_seconds)

    if lookup is not None:
        results = await run_checks(domains, options=options, resolver=resolver, lookup=lookup, hooks=hooks)
    else:
        limiter = build_rate_limiter(options.requests_per_second)
        async with OwnershipLookupClient.from_options(options, rate_limiter=limiter) as client:
            results = await run_checks(domains, options=options, resolver=resolver, lookup=client, hooks=hooks)

    return CheckRun(
        summary=summarize(results),
        results=tuple(results),
        strict=options.strict,
    )
