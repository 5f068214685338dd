"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts and headers for every ownership API request.
- Eases testing: callers accept an injected client (e.g. one built on
  `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import CheckOptions


def build_async_client(
    options: CheckOptions,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    Why a builder:
    - Centralizes timeouts/headers so every endpoint behaves the same.
    - Connection pooling is sized to the domain concurrency; responses are
      never cached.
    """

    headers: dict[str, str] = {
        "User-Agent": options.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    limits = httpx.Limits(
        max_connections=max(10, options.concurrency * 2),
        max_keepalive_connections=max(5, options.concurrency),
    )
    return httpx.AsyncClient(
        timeout=httpx.Timeout(options.timeout_seconds),
        follow_redirects=True,
        headers=headers,
        limits=limits,
        transport=transport,
    )
