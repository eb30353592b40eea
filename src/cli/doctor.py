"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.rest_client import RestClient
from core.config import AppSettings, write_user_env_vars
from core.domain.models import Request
from core.errors import HarnessError
from core.resources_loader import candidate_dirs

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(settings: AppSettings) -> tuple[bool, str]:
    try:
        with RestClient(settings) as client:
            response = client.head(Request(path="/"))
        return True, f"HTTP {response.status_code}"
    except HarnessError as exc:
        return False, str(exc)


def _check_resources(settings: AppSettings) -> tuple[bool, str]:
    existing = [str(d) for d in candidate_dirs(settings) if d.is_dir()]
    if not existing:
        return False, "No resource directory found"
    return True, existing[0]


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="rest-harness Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.env:
        table.add_row("Base URI (env)", "OK", settings.env)
    else:
        table.add_row("Base URI (env)", "MISSING", "Set REST_HARNESS_ENV or run `doctor setup`")
    table.add_row("Redirects", "OK", "follow" if settings.follow_redirects else "do not follow")
    table.add_row("Default charset", "OK", settings.default_charset)
    table.add_row("TLS verification", "OK" if settings.verify_tls else "DISABLED", str(settings.verify_tls))

    # Connectivity (best-effort)
    if settings.env:
        ok_http, detail_http = _check_http(settings)
        table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    # Fixtures
    ok_res, detail_res = _check_resources(settings)
    table.add_row("Resources", "OK" if ok_res else "OPTIONAL", detail_res)

    _console.print(table)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores the base URI in the user config .env)."""

    settings = AppSettings()
    base_uri = typer.prompt("Base URI", default=settings.env or "", show_default=True).strip()
    client_id = typer.prompt("X-Client-Id", default=settings.client_id, show_default=True).strip()

    if not base_uri:
        raise typer.BadParameter("base URI is required")

    env_path = write_user_env_vars(
        {
            "REST_HARNESS_ENV": base_uri,
            "REST_HARNESS_CLIENT_ID": client_id,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
