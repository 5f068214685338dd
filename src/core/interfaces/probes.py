"""Contracts for the network probes used by the check pipeline.

Why Protocol:
- Defines a structural contract (duck typing) without rigid inheritance.
- Lets the orchestrator run against the system resolver and the HTTP
  ownership client in production, and against in-memory fakes in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DomainResolver(Protocol):
    """Resolves a domain name to its IPv4 addresses.

    Design rules:
    - `resolve` is asynchronous because it waits on the name service.
    - Raises `ResolutionFailure` on error, timeout or an empty IPv4 set.
    """

    async def resolve(self, name: str) -> tuple[str, ...]:
        """Return the IPv4 addresses for `name` in resolver order."""

        ...


@runtime_checkable
class OwnershipLookup(Protocol):
    """Maps an IP address to the operator label of its network block."""

    async def lookup(self, ip: str) -> str:
        """Return the operator label or raise `AllEndpointsExhausted`."""

        ...


@runtime_checkable
class RateGate(Protocol):
    """Shared gate bounding the aggregate outbound request rate."""

    async def acquire(self) -> None:
        ...
