"""CLI de rest-harness (Typer + Rich).

Comandos:
- `send`: construye un `Request`, lo despacha y muestra el `Response`.
- `validate`: valida un JSON contra un schema.
- `profile`: extrae un perfil de un fichero de fixtures.
- `doctor`: diagnósticos de entorno.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from adapters.rest_client import RestClient
from cli import doctor
from cli.ui_components import build_errors_table, build_headers_table, build_response_panel, print_banner
from core.config import AppSettings
from core.domain.models import JSON_CONTENT_TYPE, Request, Verb
from core.errors import HarnessError
from core.json_utils import get_profile_from_json, schema_errors
from core.logging_setup import configure_logging

app = typer.Typer(no_args_is_help=True, help="REST API test-automation helpers.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _parse_pairs(values: list[str] | None, separator: str, option: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for raw in values or []:
        key, sep, value = raw.partition(separator)
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected KEY{separator}VALUE, got '{raw}'", param_hint=option)
        out[key.strip()] = value.strip() if separator == ":" else value
    return out


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests/responses (DEBUG)."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only warnings and errors."),
) -> None:
    settings = AppSettings()
    level = "DEBUG" if verbose else "WARNING" if quiet else settings.log_level
    configure_logging(level)


@app.command()
def send(
    method: Verb = typer.Argument(..., case_sensitive=False, help="HTTP verb."),
    path: str = typer.Argument(..., help="Path (relative to the base URI) or absolute URL."),
    header: list[str] = typer.Option(None, "--header", "-H", help="Header as NAME:VALUE."),
    query: list[str] = typer.Option(None, "--query", help="Query param as KEY=VALUE."),
    form: list[str] = typer.Option(None, "--form", help="Form param as KEY=VALUE (POST)."),
    param: list[str] = typer.Option(None, "--param", help="Generic param as KEY=VALUE (POST, URL-encoded body)."),
    path_param: list[str] = typer.Option(None, "--path-param", help="Path param as KEY=VALUE for {KEY}."),
    body: str = typer.Option("", "--body", "-d", help="Raw body."),
    content_type: str = typer.Option(JSON_CONTENT_TYPE, "--content-type", help="Content-Type."),
    version: str = typer.Option("", "--version", help="Prefix prepended to the path (e.g. /v2)."),
    base_url: str | None = typer.Option(None, "--base-url", help="Base URI (overrides REST_HARNESS_ENV)."),
    follow_redirects: bool = typer.Option(False, "--follow-redirects", help="Follow redirects."),
    show_headers: bool = typer.Option(False, "--show-headers", help="Print response headers."),
) -> None:
    """Send one request and print the response."""

    settings = AppSettings()
    update: dict[str, object] = {"follow_redirects": follow_redirects or settings.follow_redirects}
    if base_url:
        update["env"] = base_url
    settings = settings.model_copy(update=update)

    if content_type == JSON_CONTENT_TYPE:
        request = Request.generate(body, path, client_id=settings.client_id)
    else:
        request = Request(path=path, body=body, content_type=content_type or None)
    request.verb = method
    request.version = version
    request.headers.update(_parse_pairs(header, ":", "--header"))
    request.query_params = _parse_pairs(query, "=", "--query")
    request.form_params = _parse_pairs(form, "=", "--form")
    request.params = _parse_pairs(param, "=", "--param")
    request.path_params = _parse_pairs(path_param, "=", "--path-param")

    try:
        with RestClient(settings) as client:
            response = client.send(request)
    except HarnessError as exc:
        _console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    if show_headers:
        _console.print(build_headers_table(response.headers))
    _console.print(build_response_panel(response))


@app.command()
def validate(
    data_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON document."),
    schema_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON schema."),
) -> None:
    """Validate a JSON document against a JSON schema."""

    data = data_file.read_text(encoding="utf-8")
    schema = schema_file.read_text(encoding="utf-8")
    try:
        errors = schema_errors(data, schema)
    except HarnessError as exc:
        _console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    if errors:
        _console.print(build_errors_table(errors))
        raise typer.Exit(code=1)
    _console.print("[green]Valid[/green]")


@app.command()
def profile(
    resource: str = typer.Argument(..., help="Fixture name, e.g. /profiles/users.json"),
    name: str = typer.Argument(..., help="Profile name inside the fixture."),
) -> None:
    """Print one named profile from a fixtures file."""

    try:
        text = get_profile_from_json(resource, name)
    except FileNotFoundError as exc:
        _console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc
    _console.print_json(text)


@app.command()
def banner() -> None:
    """Show the banner."""

    print_banner(_console)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
