"""Loading of domain lists (YAML or JSON).

The file format is picked by suffix: `.json` is parsed as JSON, anything
else as YAML. Any read, parse or validation problem is reported as a single
`DomainListError` so the CLI can exit with a diagnostic.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from adapters.domain_list.models import DomainListFile
from core.domain.errors import DomainListError
from core.domain.models import DomainSpec


def parse_domain_list(raw: str, *, fmt: str = "yaml") -> DomainListFile:
    try:
        data = json.loads(raw) if fmt == "json" else yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DomainListError(f"cannot parse domain list: {exc}") from exc

    if data is None:
        data = {}
    try:
        return DomainListFile.model_validate(data)
    except ValidationError as exc:
        raise DomainListError(f"invalid domain list: {exc}") from exc


def load_domain_list(path: Path) -> list[DomainSpec]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DomainListError(f"cannot read domain list {path}: {exc}") from exc

    fmt = "json" if path.suffix.lower() == ".json" else "yaml"
    document = parse_domain_list(raw, fmt=fmt)
    try:
        return document.specs()
    except ValidationError as exc:
        raise DomainListError(f"invalid domain list {path}: {exc}") from exc
