"""Domain errors.

Why typed exceptions:
- The ownership client decides retry vs. fallback on the exception type, not
  on message text.
- Every resolution/lookup error converts to a `FailureInfo` so the
  orchestrator can record it as data instead of letting it cross task
  boundaries.
"""

from __future__ import annotations

from core.domain.models import FailureInfo, FailureKind


class DNSCheckError(Exception):
    """Base class for every dnscheck error."""


class CheckFailure(DNSCheckError):
    """An error that is recorded on a result instead of aborting the run."""

    kind: FailureKind = FailureKind.PROTOCOL
    retryable: bool = False

    def to_info(self) -> FailureInfo:
        return FailureInfo(kind=self.kind, message=str(self))


class ResolutionFailure(CheckFailure):
    """Name lookup failed, timed out or produced no IPv4 address."""

    kind = FailureKind.RESOLUTION

    def __init__(self, name: str, reason: str, *, no_ipv4: bool = False) -> None:
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason
        self.no_ipv4 = no_ipv4


class LookupTransportFailure(CheckFailure):
    """Network-level failure or timeout during an ownership request."""

    kind = FailureKind.TRANSPORT
    retryable = True


class LookupProtocolFailure(CheckFailure):
    """Unexpected HTTP status, undecodable body or no usable label field."""

    kind = FailureKind.PROTOCOL

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


class AllEndpointsExhausted(CheckFailure):
    """Every configured endpoint failed after its retry budget."""

    kind = FailureKind.EXHAUSTED

    def __init__(self, ip: str, last_error: Exception | None) -> None:
        detail = str(last_error) if last_error is not None else "no endpoints configured"
        super().__init__(f"all ownership endpoints failed for {ip}: {detail}")
        self.ip = ip
        self.last_error = last_error


class DomainListError(DNSCheckError):
    """The domain list could not be read or validated."""


class ReportWriteError(DNSCheckError):
    """The final report could not be persisted."""
