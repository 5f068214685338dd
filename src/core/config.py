"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets adapters (HTTP/DNS) read configuration consistently.
- CLI flags are merged once into an immutable `CheckOptions` value that is
  passed explicitly to the pipeline; no component reads global state.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Language

DEFAULT_API_ENDPOINT = "https://uapis.cn/api/v1/network/ipinfo?ip="


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "dnscheck"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "dnscheck"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "dnscheck"
    return Path.home() / ".config" / "dnscheck"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# dnscheck user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


def split_endpoints(raw: str) -> tuple[str, ...]:
    """Split a comma-delimited priority list, dropping blanks."""

    return tuple(part.strip() for part in raw.split(",") if part.strip())


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without dirtying the Core.
    - A single configuration contract for CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="DNSCHECK_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_endpoints: str = Field(
        default=DEFAULT_API_ENDPOINT,
        min_length=1,
        description="IP ownership API URL prefixes, comma-delimited, tried in order.",
    )
    concurrency: int = Field(
        default=2,
        ge=1,
        le=500,
        description="Maximum number of domains checked at the same time.",
    )
    strict: bool = Field(
        default=False,
        description="Strict mode: every resolved IP must match an expected prefix.",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout per HTTP request and per DNS resolution (seconds).",
    )
    requests_per_second: float = Field(
        default=2.0,
        ge=0,
        description="Global ownership-lookup rate limit (0 disables it).",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retries per endpoint after a transient failure.",
    )
    backoff_base_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Unit of the exponential backoff (base * 2**attempt).",
    )
    user_agent: str = Field(
        default="dnscheck/0.1 (+https://local)",
        min_length=1,
        description="User-Agent sent to the ownership APIs.",
    )
    domains_file: Path = Field(
        default=Path("sites.yaml"),
        description="Domain list (YAML or JSON).",
    )
    default_language: Language = Field(
        default=Language.ENGLISH,
        description="Default language for reports (en/zh).",
    )

    @property
    def endpoint_list(self) -> tuple[str, ...]:
        return split_endpoints(self.api_endpoints)


class CheckOptions(BaseModel):
    """Immutable run configuration passed to the pipeline."""

    model_config = ConfigDict(frozen=True)

    endpoints: tuple[str, ...] = Field(..., min_length=1)
    concurrency: int = Field(default=2, ge=1)
    strict: bool = False
    timeout_seconds: float = Field(default=10.0, gt=0)
    requests_per_second: float = Field(default=2.0, ge=0)
    max_retries: int = Field(default=2, ge=0)
    backoff_base_seconds: float = Field(default=1.0, ge=0)
    user_agent: str = "dnscheck/0.1 (+https://local)"

    @classmethod
    def from_settings(cls, settings: AppSettings, **overrides: object) -> "CheckOptions":
        """Merge settings with CLI overrides; `None` overrides are ignored."""

        values: dict[str, object] = {
            "endpoints": settings.endpoint_list,
            "concurrency": settings.concurrency,
            "strict": settings.strict,
            "timeout_seconds": settings.http_timeout_seconds,
            "requests_per_second": settings.requests_per_second,
            "max_retries": settings.max_retries,
            "backoff_base_seconds": settings.backoff_base_seconds,
            "user_agent": settings.user_agent,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
