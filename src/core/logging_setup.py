"""Configuración de logging para la CLI.

La librería sólo usa `logging.getLogger(__name__)`; quien la embebe (pytest,
un runner de escenarios) decide los handlers. La CLI instala un
`RichHandler` una única vez.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str | int = "INFO", *, console: Console | None = None) -> logging.Logger:
    root = logging.getLogger()
    root.setLevel(level if isinstance(level, int) else level.upper())

    # Evita handlers duplicados si se llama varias veces.
    if any(isinstance(h, RichHandler) for h in root.handlers):
        return root

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    root.addHandler(handler)
    return root
