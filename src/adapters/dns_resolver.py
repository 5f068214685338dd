"""Domain resolution through the operating system's name service.

Why the system resolver (and never a hardcoded DNS server):
- The point of the check is to observe the answer the current network path
  actually produces, including a polluted one.

IPv4 only: `getaddrinfo` is asked for `AF_INET` and results are de-duplicated
in resolver order.
"""

from __future__ import annotations

import asyncio
import socket

from loguru import logger

from core.domain.errors import ResolutionFailure


class SystemResolver:
    """Resolves names with `loop.getaddrinfo`, bounded by a timeout."""

    def __init__(self, timeout: float = 10.0) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._timeout = timeout

    async def _getaddrinfo(self, name: str) -> list[tuple]:
        loop = asyncio.get_running_loop()
        return await loop.getaddrinfo(
            name,
            None,
            family=socket.AF_INET,
            type=socket.SOCK_STREAM,
        )

    async def resolve(self, name: str) -> tuple[str, ...]:
        try:
            infos = await asyncio.wait_for(self._getaddrinfo(name), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise ResolutionFailure(name, f"lookup timed out after {self._timeout:g}s") from exc
        except (OSError, UnicodeError) as exc:
            raise ResolutionFailure(name, f"lookup failed: {exc}") from exc

        addresses: list[str] = []
        for family, _type, _proto, _canon, sockaddr in infos:
            if family != socket.AF_INET:
                continue
            ip = sockaddr[0]
            if ip not in addresses:
                addresses.append(ip)

        if not addresses:
            raise ResolutionFailure(name, "no IPv4 address found", no_ipv4=True)

        logger.debug(f"Resolved {name} -> {', '.join(addresses)}")
        return tuple(addresses)
