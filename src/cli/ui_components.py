"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from core.domain.models import JSON_CONTENT_TYPE, Response
from core.json_utils import try_pretty_print_json


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("REST-HARNESS", style="bold cyan")
    subtitle = Text("Requests • Responses • JSON fixtures", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _status_style(status_code: int) -> str:
    if status_code < 300:
        return "green"
    if status_code < 400:
        return "yellow"
    return "red"


def build_headers_table(headers: dict[str, str], *, title: str = "Headers") -> Table:
    table = Table(title=title)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for name, value in headers.items():
        table.add_row(name, value)
    return table


def build_response_panel(response: Response) -> Panel:
    """Panel con el body; JSON resaltado si el Content-Type lo indica."""

    content_type = response.header("Content-Type") or ""
    body: Text | Syntax = Text(response.body or "(empty body)")
    pretty = try_pretty_print_json(response.body) if JSON_CONTENT_TYPE in content_type else None
    if pretty is not None:
        body = Syntax(pretty, "json", word_wrap=True)

    style = _status_style(response.status_code)
    title = Text(f"HTTP {response.status_code}", style=f"bold {style}")
    return Panel(body, title=title, border_style=style)


def build_errors_table(errors: list[str]) -> Table:
    table = Table(title="Schema errors")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Error", style="red")
    for idx, err in enumerate(errors, start=1):
        table.add_row(str(idx), err)
    return table
