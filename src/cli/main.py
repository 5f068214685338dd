"""dnscheck command-line interface (Typer).

Commands:
- `check`: resolve the configured domains, look up IP ownership, report.
- `render`: re-render a saved JSON run as a text/HTML report.
- `doctor`: environment diagnostics.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from adapters.domain_list import load_domain_list
from adapters.json_exporter import export_run_json, load_run_json
from adapters.report_exporter import ReportFormat, default_report_path, export_report, render_report
from cli import doctor
from cli.ui_components import build_results_table, build_summary_panel, print_banner
from core.config import AppSettings, CheckOptions, split_endpoints
from core.domain.errors import DomainListError, ReportWriteError
from core.domain.language import Language
from core.resources_loader import resolve_domains_file
from core.services.check_pipeline import PipelineHooks, execute

app = typer.Typer(
    no_args_is_help=True,
    help="Detect DNS pollution by checking who owns the IPs your resolver returns.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure loguru: one stderr sink, DEBUG with --verbose, WARNING with --quiet."""

    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level="DEBUG" if verbose else ("WARNING" if quiet else "INFO"),
        colorize=True,
    )


def _fail(message: str) -> typer.Exit:
    _err_console.print(f"[bold red]Error:[/bold red] {message}")
    return typer.Exit(code=1)


@app.command()
def check(
    config_file: Path | None = typer.Option(
        None, "--file", "-f", help="Domain list (YAML or JSON). Default: sites.yaml."
    ),
    api: str | None = typer.Option(
        None, "--api", help="Ownership API URL prefixes, comma-delimited, tried in order."
    ),
    concurrency: int | None = typer.Option(None, "--concurrency", "-c", min=1, help="Domains checked at once."),
    strict: bool = typer.Option(
        False, "--strict", help="Strict: every resolved IP must match an expected prefix."
    ),
    timeout: float | None = typer.Option(None, "--timeout", min=0.001, help="Per-request/resolution timeout (s)."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Report path (default: timestamped file in the CWD)."
    ),
    fmt: ReportFormat = typer.Option(ReportFormat.TEXT, "--format", help="Report format."),
    json_output: Path | None = typer.Option(None, "--json-output", help="Also save the run as JSON."),
    rps: float | None = typer.Option(None, "--rps", min=0, help="Requests per second (0 disables limiting)."),
    retry: int | None = typer.Option(None, "--retry", min=0, help="Max retries per endpoint."),
    lang: Language | None = typer.Option(None, "--lang", help="Report language."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print the report to stdout."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Check every configured domain for DNS pollution."""

    setup_logging(verbose, quiet)
    settings = AppSettings()
    language = lang or settings.default_language

    try:
        options = CheckOptions.from_settings(
            settings,
            endpoints=split_endpoints(api) if api is not None else None,
            concurrency=concurrency,
            strict=True if strict else None,
            timeout_seconds=timeout,
            requests_per_second=rps,
            max_retries=retry,
        )
    except ValueError as exc:
        raise _fail(f"invalid options: {exc}")

    domains_path = resolve_domains_file(config_file or settings.domains_file)
    try:
        domains = load_domain_list(domains_path)
    except DomainListError as exc:
        raise _fail(f"failed to load domain list: {exc}")

    if not quiet:
        print_banner(_console)
    logger.info(f"Loaded {len(domains)} domains from {domains_path}")
    logger.debug(f"Report language: {language.label()}")

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=_err_console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Checking domains", total=len(domains))
        hooks = PipelineHooks(domain_done=lambda _result: progress.advance(task_id))
        run = asyncio.run(execute(domains, options, hooks=hooks))

    if not quiet:
        _console.print(build_results_table(run.results, language))
        _console.print(build_summary_panel(run.summary, language))
        if fmt is ReportFormat.TEXT:
            _console.print(render_report(run=run, language=language), markup=False, highlight=False)

    report_path = output or default_report_path(fmt)
    try:
        export_report(run=run, output_path=report_path, fmt=fmt, language=language)
        if json_output is not None:
            export_run_json(run=run, output_path=json_output)
    except ReportWriteError as exc:
        raise _fail(str(exc))

    _console.print(f"\n[green]Report saved to:[/green] {report_path}")
    if json_output is not None:
        _console.print(f"[green]JSON saved to:[/green] {json_output}")


@app.command()
def render(
    run_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON produced by --json-output."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Report path."),
    fmt: ReportFormat = typer.Option(ReportFormat.TEXT, "--format", help="Report format."),
    lang: Language = typer.Option(Language.ENGLISH, "--lang", help="Report language."),
) -> None:
    """Render a saved JSON run as a report."""

    setup_logging()
    try:
        run = load_run_json(run_file)
    except ValueError as exc:
        raise _fail(f"cannot read run file {run_file}: {exc}")

    report_path = output or default_report_path(fmt)
    try:
        export_report(run=run, output_path=report_path, fmt=fmt, language=lang)
    except ReportWriteError as exc:
        raise _fail(str(exc))
    _console.print(f"[green]Report saved to:[/green] {report_path}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
