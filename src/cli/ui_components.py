"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse the same tables/panels.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.language import Language
from core.domain.models import DomainResult, PollutionLevel, RunSummary
from core.services.aggregator import ip_matches

_LEVEL_STYLES = {
    PollutionLevel.NORMAL: "green",
    PollutionLevel.MILD: "yellow",
    PollutionLevel.MODERATE: "dark_orange",
    PollutionLevel.SEVERE: "bold red",
}


def print_banner(console: Console) -> None:
    """Print the welcome banner.

    Why here:
    - Avoids circular imports (main <-> doctor).
    - Lets non-interactive modes skip the banner.
    """

    title = Text("dnscheck", style="bold cyan")
    subtitle = Text("DNS pollution detection • IP ownership • operator matching", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_results_table(
    results: Iterable[DomainResult],
    language: Language = Language.ENGLISH,
) -> Table:
    """One row per domain, per-IP details in the last column."""

    table = Table(title="Domain Results")
    table.add_column("Domain", style="cyan", no_wrap=True)
    table.add_column("Verdict", no_wrap=True)
    table.add_column("Summary", style="white")
    table.add_column("IPs", style="magenta")

    for result in results:
        verdict = Text("POLLUTED", style="bold red") if result.is_polluted else Text("clean", style="green")
        summary = result.summary.label(language)
        if result.detail:
            summary = f"{summary}\n[dim]{result.detail}[/dim]"

        lines: list[str] = []
        for ip_result in result.ip_results:
            if ip_result.failure is not None:
                lines.append(f"{ip_result.ip} [red]error[/red]")
            elif ip_matches(ip_result, result.expected_prefixes):
                lines.append(f"{ip_result.ip} {ip_result.label}")
            else:
                lines.append(f"{ip_result.ip} [yellow]{ip_result.label}[/yellow]")
        table.add_row(result.domain, verdict, summary, "\n".join(lines) or "-")
    return table


def build_summary_panel(summary: RunSummary, language: Language = Language.ENGLISH) -> Panel:
    """Panel for the run totals and severity."""

    style = _LEVEL_STYLES[summary.level]
    body = Text()
    body.append(f"Domains checked: {summary.total}\n")
    body.append(f"Polluted: {summary.polluted_count}\n")
    body.append(f"Pollution rate: {summary.pollution_rate:.2f}%\n")
    body.append("Level: ")
    body.append(summary.level.label(language), style=style)
    return Panel(body, title=Text("Summary", style="bold"), border_style=style)
