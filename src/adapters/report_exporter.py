"""Report export.

Why it lives in adapters:
- Text/HTML rendering (Jinja2) and writing to disk are infrastructure details.
- The Core only knows the `CheckRun` aggregate.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from core.domain.errors import ReportWriteError
from core.domain.language import Language
from core.domain.models import CheckRun
from core.services.aggregator import ip_matches


_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class ReportFormat(str, Enum):
    TEXT = "txt"
    HTML = "html"


_STRINGS: dict[Language, dict[str, str]] = {
    Language.ENGLISH: {
        "title": "DNS Pollution Check Report",
        "generated": "Generated at",
        "mode": "Mode",
        "strict": "strict",
        "lenient": "lenient",
        "total": "Domains checked",
        "polluted": "Polluted domains",
        "rate": "Pollution rate",
        "level": "Pollution level",
        "details": "Details",
        "domain": "Domain",
        "summary": "Summary",
        "polluted_flag": "polluted",
        "detail": "Detail",
        "error": "error",
        "expected": "expected",
        "normal": "normal",
        "suspicious": "possibly polluted",
    },
    Language.CHINESE: {
        "title": "DNS 污染检测报告",
        "generated": "生成时间",
        "mode": "模式",
        "strict": "严格",
        "lenient": "宽松",
        "total": "检测域名总数",
        "polluted": "被污染域名数",
        "rate": "污染率",
        "level": "污染程度",
        "details": "详细结果",
        "domain": "域名",
        "summary": "汇总",
        "polluted_flag": "污染",
        "detail": "详情",
        "error": "错误",
        "expected": "期望",
        "normal": "正常",
        "suspicious": "可能被污染",
    },
}


def _get_env(fmt: ReportFormat) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=fmt is ReportFormat.HTML,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def _context(run: CheckRun, language: Language) -> dict[str, Any]:
    t = _STRINGS[language]
    rows = []
    for result in run.results:
        ips = []
        for ip_result in result.ip_results:
            ips.append(
                {
                    "ip": ip_result.ip,
                    "label": ip_result.label,
                    "error": str(ip_result.failure) if ip_result.failure else None,
                    "matched": ip_matches(ip_result, result.expected_prefixes),
                }
            )
        rows.append(
            {
                "domain": result.domain,
                "expected": "[" + " ".join(result.expected_prefixes) + "]",
                "summary": result.summary.label(language),
                "polluted": result.is_polluted,
                "detail": result.detail,
                "ips": ips,
            }
        )

    return {
        "t": t,
        "lang": language.value,
        "summary": run.summary,
        "level": run.summary.level.label(language),
        "mode": t["strict"] if run.strict else t["lenient"],
        "generated_at_local": run.generated_at.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
        "rows": rows,
    }


def render_report(
    *,
    run: CheckRun,
    fmt: ReportFormat = ReportFormat.TEXT,
    language: Language = Language.ENGLISH,
) -> str:
    """Render the run as plain text or self-contained HTML."""

    template = _get_env(fmt).get_template(f"report.{fmt.value}.j2")
    return template.render(**_context(run, language))


def default_report_path(fmt: ReportFormat = ReportFormat.TEXT, now: datetime | None = None) -> Path:
    now = now or datetime.now()
    return Path(f"dnscheck_report_{now.strftime('%Y%m%d_%H%M%S')}.{fmt.value}")


def export_report(
    *,
    run: CheckRun,
    output_path: Path,
    fmt: ReportFormat = ReportFormat.TEXT,
    language: Language = Language.ENGLISH,
) -> Path:
    """Render and persist the report; a write failure raises `ReportWriteError`."""

    content = render_report(run=run, fmt=fmt, language=language)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ReportWriteError(f"cannot write report to {output_path}: {exc}") from exc
    return output_path
