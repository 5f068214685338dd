"""JSON export of a check run.

Why JSON:
- Interoperability with other tooling and pipelines.
- Lets runs be replayed: verdicts are a pure function of the stored results.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.errors import ReportWriteError
from core.domain.models import CheckRun


def export_run_json(*, run: CheckRun, output_path: Path) -> Path:
    """Export `CheckRun` as UTF-8 JSON with a stable layout."""

    payload = run.model_dump(mode="json")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
    except OSError as exc:
        raise ReportWriteError(f"cannot write JSON report to {output_path}: {exc}") from exc
    return output_path


def load_run_json(path: Path) -> CheckRun:
    return CheckRun.model_validate_json(path.read_text(encoding="utf-8"))
