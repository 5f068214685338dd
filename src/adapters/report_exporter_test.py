"""Tests for the text/HTML/JSON report exporters."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from adapters import report_exporter
from adapters.json_exporter import export_run_json, load_run_json
from adapters.report_exporter import ReportFormat, default_report_path, export_report, render_report
from core.domain.errors import ReportWriteError
from core.domain.language import Language
from core.domain.models import (
    CheckRun,
    DomainResult,
    FailureInfo,
    FailureKind,
    IPCheckResult,
    SummaryTag,
)
from core.services.run_summary import summarize


@pytest.fixture
def run() -> CheckRun:
    results = (
        DomainResult(
            domain="a.example",
            expected_prefixes=("AMAZON",),
            ip_results=(
                IPCheckResult(ip="52.84.0.1", label="AMAZON-02"),
                IPCheckResult(ip="10.0.0.1", label="CHINANET"),
                IPCheckResult(
                    ip="10.0.0.2",
                    failure=FailureInfo(kind=FailureKind.EXHAUSTED, message="all ownership endpoints failed"),
                ),
            ),
            is_polluted=False,
            summary=SummaryTag.LENIENT_CLEAN,
        ),
        DomainResult(
            domain="b.example",
            expected_prefixes=("GOOGLE",),
            is_polluted=True,
            summary=SummaryTag.RESOLUTION_FAILED,
            detail="lookup timed out after 10s",
        ),
    )
    return CheckRun(
        summary=summarize(results),
        results=results,
        strict=False,
        generated_at=datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc),
    )


class TestTemplates:
    def test_templates_ship_beside_the_exporter(self):
        templates = Path(report_exporter.__file__).resolve().parent / "templates"
        for fmt in ReportFormat:
            assert (templates / f"report.{fmt.value}.j2").is_file()


class TestRenderText:
    def test_header_numbers(self, run):
        text = render_report(run=run)

        assert text.startswith("DNS Pollution Check Report\n")
        assert "Domains checked: 2" in text
        assert "Polluted domains: 1" in text
        assert "Pollution rate: 50.00%" in text
        assert "Pollution level: Moderate pollution" in text
        assert "Mode: lenient" in text

    def test_per_ip_lines(self, run):
        text = render_report(run=run)

        assert "IP 52.84.0.1: LLC=AMAZON-02 (expected: [AMAZON]) - normal" in text
        assert "IP 10.0.0.1: LLC=CHINANET (expected: [AMAZON]) - possibly polluted" in text
        assert "IP 10.0.0.2: error - all ownership endpoints failed" in text

    def test_resolution_failure_block(self, run):
        text = render_report(run=run)

        assert "Domain: b.example" in text
        assert "Summary: DNS resolution failed (polluted: true)" in text
        assert "Detail: lookup timed out after 10s" in text

    def test_chinese_labels(self, run):
        text = render_report(run=run, language=Language.CHINESE)

        assert "DNS 污染检测报告" in text
        assert "污染程度: 中度污染" in text
        assert "至少有一个 IP 符合预期" in text


class TestRenderHtml:
    def test_html_is_escaped(self, run):
        hostile = run.model_copy(
            update={
                "results": (
                    DomainResult(
                        domain="x.example",
                        expected_prefixes=("AMAZON",),
                        ip_results=(IPCheckResult(ip="1.1.1.1", label="<script>alert(1)</script>"),),
                        is_polluted=True,
                        summary=SummaryTag.LENIENT_POLLUTED,
                    ),
                )
            }
        )

        html = render_report(run=hostile, fmt=ReportFormat.HTML)

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html


class TestExport:
    def test_default_report_path(self):
        path = default_report_path(now=datetime(2026, 1, 2, 3, 4, 5))
        assert path == Path("dnscheck_report_20260102_030405.txt")
        assert default_report_path(ReportFormat.HTML, now=datetime(2026, 1, 2, 3, 4, 5)).suffix == ".html"

    def test_export_writes_file(self, run, tmp_path):
        out = export_report(run=run, output_path=tmp_path / "reports" / "r.txt")
        assert out.read_text(encoding="utf-8") == render_report(run=run)

    def test_unwritable_path_raises_report_write_error(self, run, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")

        with pytest.raises(ReportWriteError):
            export_report(run=run, output_path=blocker / "r.txt")

    def test_json_round_trip(self, run, tmp_path):
        path = export_run_json(run=run, output_path=tmp_path / "run.json")
        assert load_run_json(path) == run
