"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  Core to I/O libraries.
- Results serialize straight to JSON for the exporters.

Note:
- These models describe *what* a check produced, not *how* it was obtained.
- Every model is frozen: once a result is handed to the aggregator or the
  orchestrator it is never mutated.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict

from core.domain.language import Language


class FailureKind(str, Enum):
    """Classification of a failed resolution or ownership lookup."""

    RESOLUTION = "resolution"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    EXHAUSTED = "exhausted"
    INTERNAL = "internal"


class SummaryTag(str, Enum):
    """Fixed vocabulary for a domain verdict.

    The report renderer depends on this set; it is not free text.
    """

    STRICT_CLEAN = "strict-clean"
    STRICT_POLLUTED = "strict-polluted"
    LENIENT_CLEAN = "lenient-clean"
    LENIENT_POLLUTED = "lenient-polluted"
    RESOLUTION_FAILED = "resolution-failed"
    NO_IPV4 = "no-ipv4"

    def label(self, language: Language = Language.ENGLISH) -> str:
        return _SUMMARY_LABELS[language][self]


_SUMMARY_LABELS: dict[Language, dict[SummaryTag, str]] = {
    Language.ENGLISH: {
        SummaryTag.STRICT_CLEAN: "All IPs match the expected operators",
        SummaryTag.STRICT_POLLUTED: "Strict mode: some IPs do not match the expected operators",
        SummaryTag.LENIENT_CLEAN: "At least one IP matches the expected operators",
        SummaryTag.LENIENT_POLLUTED: "Lenient mode: no IP matches the expected operators",
        SummaryTag.RESOLUTION_FAILED: "DNS resolution failed",
        SummaryTag.NO_IPV4: "No IPv4 address found",
    },
    Language.CHINESE: {
        SummaryTag.STRICT_CLEAN: "所有 IP 均符合预期",
        SummaryTag.STRICT_POLLUTED: "严格模式：部分 IP 不符合预期",
        SummaryTag.LENIENT_CLEAN: "至少有一个 IP 符合预期",
        SummaryTag.LENIENT_POLLUTED: "宽松模式：无任何 IP 符合预期",
        SummaryTag.RESOLUTION_FAILED: "DNS 解析失败",
        SummaryTag.NO_IPV4: "没有找到 IPv4 地址",
    },
}


class PollutionLevel(str, Enum):
    """Severity of a whole run, derived from the pollution rate."""

    NORMAL = "normal"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    def label(self, language: Language = Language.ENGLISH) -> str:
        return _LEVEL_LABELS[language][self]


_LEVEL_LABELS: dict[Language, dict[PollutionLevel, str]] = {
    Language.ENGLISH: {
        PollutionLevel.NORMAL: "Normal",
        PollutionLevel.MILD: "Mild pollution",
        PollutionLevel.MODERATE: "Moderate pollution",
        PollutionLevel.SEVERE: "Severe pollution",
    },
    Language.CHINESE: {
        PollutionLevel.NORMAL: "正常",
        PollutionLevel.MILD: "轻度污染",
        PollutionLevel.MODERATE: "中度污染",
        PollutionLevel.SEVERE: "重度污染",
    },
}


class DomainSpec(BaseModel):
    """A configured domain and the operators it is expected to resolve to."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=253,
        description="Domain name to resolve through the system resolver.",
    )
    expected_prefixes: tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Case-sensitive operator-label prefixes (e.g. 'AMAZON').",
    )

    @field_validator("expected_prefixes")
    @classmethod
    def _no_blank_prefix(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not prefix for prefix in value):
            raise ValueError("expected prefixes must be non-empty strings")
        return value


class FailureInfo(BaseModel):
    """Serializable descriptor of a failed resolution or lookup."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind = Field(
        ...,
        description="Failure classification.",
    )
    message: str = Field(
        ...,
        description="Diagnostic text (includes the most recent underlying error).",
    )

    def __str__(self) -> str:
        return self.message


class IPCheckResult(BaseModel):
    """Ownership lookup outcome for one resolved IPv4 address."""

    model_config = ConfigDict(frozen=True)

    ip: str = Field(
        ...,
        min_length=1,
        description="IPv4 address in dotted-quad form.",
    )
    label: str | None = Field(
        default=None,
        description="Operator label returned by the ownership API (success only).",
    )
    failure: FailureInfo | None = Field(
        default=None,
        description="Error descriptor (failure only).",
    )

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "IPCheckResult":
        if (self.label is None) == (self.failure is None):
            raise ValueError("exactly one of 'label' or 'failure' must be set")
        return self

    @property
    def succeeded(self) -> bool:
        return self.failure is None


class DomainResult(BaseModel):
    """Verdict for one configured domain."""

    model_config = ConfigDict(frozen=True)

    domain: str = Field(
        ...,
        min_length=1,
        description="Checked domain name.",
    )
    expected_prefixes: tuple[str, ...] = Field(
        ...,
        description="Expected operator prefixes, copied from the DomainSpec.",
    )
    ip_results: tuple[IPCheckResult, ...] = Field(
        default=(),
        description="Per-IP outcomes in resolution order.",
    )
    is_polluted: bool = Field(
        ...,
        description="Aggregated pollution verdict.",
    )
    summary: SummaryTag = Field(
        ...,
        description="Fixed verdict tag selected by mode and verdict.",
    )
    detail: str | None = Field(
        default=None,
        description="Extra diagnostic text (resolution failures).",
    )


class RunSummary(BaseModel):
    """Totals and severity for a whole run."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    polluted_count: int = Field(default=0, ge=0)
    pollution_rate: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Polluted domains as a percentage of all checked domains.",
    )
    level: PollutionLevel = Field(default=PollutionLevel.NORMAL)


class CheckRun(BaseModel):
    """Aggregate handed to the report exporters.

    Why an aggregate:
    - Groups the summary, the per-domain results (arrival order) and the run
      parameters so exporters only depend on one value.
    """

    model_config = ConfigDict(frozen=True)

    summary: RunSummary = Field(...)
    results: tuple[DomainResult, ...] = Field(default=())
    strict: bool = Field(
        default=False,
        description="Matching mode used for the run.",
    )
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Report generation time (UTC).",
    )
