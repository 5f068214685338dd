"""IP ownership lookup over HTTP.

Why this lives in adapters:
- It is pure I/O: it turns an IP into an operator ("LLC") label by asking
  external APIs.

Policy:
- Endpoints are tried in priority order; each gets `max_retries + 1` attempts.
- Every attempt first waits for a token on the shared rate limiter.
- Transport errors, timeouts, 5xx and 429 are retried after an exponential
  backoff (`base * 2**attempt`); any other failure moves on to the next
  endpoint.
- Nothing is cached: every call issues fresh requests.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Mapping, Sequence

import httpx
from loguru import logger

from adapters.http_client import build_async_client
from core.config import CheckOptions
from core.domain.errors import (
    AllEndpointsExhausted,
    LookupProtocolFailure,
    LookupTransportFailure,
)
from core.interfaces.probes import RateGate

# Canonical ownership field first, then known fallbacks.
LABEL_FIELDS: tuple[str, ...] = ("llc", "isp", "carrier", "org", "asn_description")


def extract_label(document: Mapping[str, Any], fields: Sequence[str] = LABEL_FIELDS) -> str:
    """Return the first candidate field holding a non-empty string."""

    for key in fields:
        value = document.get(key)
        if isinstance(value, str) and value:
            return value
    raise LookupProtocolFailure(
        f"no operator label field ({', '.join(fields)}) in response: {dict(document)!r}"
    )


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code == 429


def backoff_seconds(attempt: int, base: float = 1.0) -> float:
    return base * (2**attempt)


class OwnershipLookupClient:
    """Resolves IPs to operator labels with endpoint fallback and retries."""

    def __init__(
        self,
        *,
        endpoints: Sequence[str],
        client: httpx.AsyncClient,
        max_retries: int = 2,
        rate_limiter: RateGate | None = None,
        backoff_base: float = 1.0,
        timeout: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._endpoints = tuple(endpoints)
        self._client = client
        self._max_retries = max_retries
        self._rate_limiter = rate_limiter
        self._backoff_base = backoff_base
        self._timeout = timeout
        self._sleep = sleep
        self._owns_client = False

    @classmethod
    def from_options(
        cls,
        options: CheckOptions,
        *,
        rate_limiter: RateGate | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "OwnershipLookupClient":
        """Build a client that owns its `httpx.AsyncClient` (close via `async with`)."""

        instance = cls(
            endpoints=options.endpoints,
            client=build_async_client(options, transport=transport),
            max_retries=options.max_retries,
            rate_limiter=rate_limiter,
            backoff_base=options.backoff_base_seconds,
            timeout=options.timeout_seconds,
        )
        instance._owns_client = True
        return instance

    async def __aenter__(self) -> "OwnershipLookupClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def endpoints(self) -> tuple[str, ...]:
        return self._endpoints

    async def query(self, endpoint: str, ip: str) -> str:
        """Single request against one endpoint, no retries."""

        url = f"{endpoint}{ip}"
        request_kwargs: dict[str, Any] = {}
        if self._timeout is not None:
            request_kwargs["timeout"] = self._timeout

        try:
            response = await self._client.get(url, **request_kwargs)
        except httpx.TimeoutException as exc:
            raise LookupTransportFailure(f"request to {url} timed out: {exc!r}") from exc
        except httpx.UnsupportedProtocol as exc:
            raise LookupProtocolFailure(f"unsupported endpoint URL {url}: {exc}") from exc
        except httpx.TransportError as exc:
            raise LookupTransportFailure(f"request to {url} failed: {exc!r}") from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise LookupProtocolFailure(f"request to {url} failed: {exc!r}") from exc

        status = response.status_code
        if status != httpx.codes.OK:
            raise LookupProtocolFailure(
                f"{url} returned HTTP {status}",
                status_code=status,
                retryable=is_retryable_status(status),
            )

        try:
            document = response.json()
        except ValueError as exc:
            raise LookupProtocolFailure(f"{url} returned an undecodable body: {exc}") from exc
        if not isinstance(document, dict):
            raise LookupProtocolFailure(
                f"{url} returned {type(document).__name__}, expected a JSON object"
            )
        return extract_label(document)

    async def lookup(self, ip: str) -> str:
        """Return the operator label for `ip` or raise `AllEndpointsExhausted`."""

        last_error: Exception | None = None
        for endpoint in self._endpoints:
            for attempt in range(self._max_retries + 1):
                if self._rate_limiter is not None:
                    await self._rate_limiter.acquire()
                try:
                    label = await self.query(endpoint, ip)
                except (LookupTransportFailure, LookupProtocolFailure) as exc:
                    last_error = exc
                    if exc.retryable and attempt < self._max_retries:
                        delay = backoff_seconds(attempt, self._backoff_base)
                        logger.debug(
                            f"Lookup {ip} attempt {attempt + 1} failed ({exc}); retrying in {delay:.1f}s"
                        )
                        await self._sleep(delay)
                        continue
                    logger.debug(f"Lookup {ip} via {endpoint} abandoned: {exc}")
                    break
                logger.debug(f"Lookup {ip} -> {label!r} via {endpoint}")
                return label

        logger.warning(f"All ownership endpoints failed for {ip}: {last_error}")
        raise AllEndpointsExhausted(ip, last_error)
