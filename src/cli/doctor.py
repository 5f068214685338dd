"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.dns_resolver import SystemResolver
from adapters.domain_list import load_domain_list
from adapters.ownership_client import OwnershipLookupClient
from core.config import AppSettings, CheckOptions, split_endpoints, write_user_env_vars
from core.domain.errors import CheckFailure, DomainListError
from core.resources_loader import resolve_domains_file

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_PROBE_DOMAIN = "example.com"
_PROBE_IP = "1.1.1.1"


async def _check_resolver(name: str, timeout: float) -> tuple[bool, str]:
    try:
        ips = await SystemResolver(timeout=timeout).resolve(name)
    except CheckFailure as exc:
        return False, str(exc)
    return True, ", ".join(ips)


async def _check_endpoint(endpoint: str, options: CheckOptions) -> tuple[bool, str]:
    """One lookup against a single endpoint, no retries, no rate limit."""

    single = options.model_copy(update={"endpoints": (endpoint,), "max_retries": 0})
    async with OwnershipLookupClient.from_options(single) as client:
        try:
            label = await client.query(endpoint, _PROBE_IP)
        except CheckFailure as exc:
            return False, str(exc)
    return True, f"{_PROBE_IP} -> {label}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    options = CheckOptions.from_settings(settings)

    table = Table(title="dnscheck Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    domains_path = resolve_domains_file(settings.domains_file)
    try:
        domains = load_domain_list(domains_path)
        table.add_row("Domain list", "OK", f"{len(domains)} domains in {domains_path}")
    except DomainListError as exc:
        table.add_row("Domain list", "FAIL", str(exc))
    rate = "disabled" if options.requests_per_second <= 0 else f"{options.requests_per_second:g} req/s"
    table.add_row("Rate limit", "OK", rate)

    # Resolver
    ok_dns, detail_dns = asyncio.run(_check_resolver(_PROBE_DOMAIN, options.timeout_seconds))
    table.add_row("System resolver", "OK" if ok_dns else "FAIL", detail_dns)

    # Endpoints (best-effort)
    any_endpoint_ok = False
    for endpoint in options.endpoints:
        ok_api, detail_api = asyncio.run(_check_endpoint(endpoint, options))
        any_endpoint_ok = any_endpoint_ok or ok_api
        table.add_row(f"API {endpoint}", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not any_endpoint_ok:
        _console.print(
            "\n[yellow]Note:[/yellow] No ownership endpoint answered; every IP will be reported as an error. "
            "Use `dnscheck doctor setup-api` or `--api` to configure working endpoints."
        )


@app.command(name="setup-api")
def setup_api() -> None:
    """Interactive ownership API setup (stores config in the user config .env)."""

    current = AppSettings().api_endpoints
    raw = typer.prompt(
        "Ownership API URL prefixes (comma-delimited, in priority order)",
        default=current,
        show_default=True,
    ).strip()

    endpoints = split_endpoints(raw)
    if not endpoints:
        raise typer.BadParameter("at least one endpoint is required")

    rps = typer.prompt("Requests per second (0 disables limiting)", default=2.0, type=float)
    if rps < 0:
        raise typer.BadParameter("requests per second must be >= 0")

    env_path = write_user_env_vars(
        {
            "DNSCHECK_API_ENDPOINTS": ",".join(endpoints),
            "DNSCHECK_REQUESTS_PER_SECOND": f"{rps:g}",
        }
    )

    _console.print(f"[green]Saved API config to:[/green] {env_path}")
