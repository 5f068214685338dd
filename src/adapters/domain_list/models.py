"""Models for the domain list file (data-driven).

Idea:
- The set of domains to check and their expected operators live in a plain
  YAML/JSON file instead of code, so users can maintain their own lists.

Format:
    domains:
      - name: example.com
        expected_llcs: [AMAZON, CLOUDFLARENET]
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field, field_validator

from core.domain.models import DomainSpec

MAX_NAME_LENGTH = 253


class DomainEntry(BaseModel):
    name: str = Field(..., min_length=1)
    expected_llcs: list[str] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("expected_llcs", "expected_prefixes"),
    )

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        name = value.strip().rstrip(".")
        if not name:
            raise ValueError("domain name is empty")
        if len(name) > MAX_NAME_LENGTH:
            raise ValueError(f"domain name longer than {MAX_NAME_LENGTH} characters")
        return name

    @field_validator("expected_llcs")
    @classmethod
    def _non_blank_prefixes(cls, value: list[str]) -> list[str]:
        if any(not prefix.strip() for prefix in value):
            raise ValueError("expected_llcs entries must be non-empty")
        return value

    def to_spec(self) -> DomainSpec:
        return DomainSpec(name=self.name, expected_prefixes=tuple(self.expected_llcs))


class DomainListFile(BaseModel):
    domains: list[DomainEntry] = Field(default_factory=list)

    def specs(self) -> list[DomainSpec]:
        return [entry.to_spec() for entry in self.domains]
