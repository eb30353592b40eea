"""Cargador de fixtures (schemas, perfiles JSON).

Este módulo vive en `core/` porque:
- centraliza dónde buscamos los recursos sin acoplarse a la CLI
- evita duplicar lógica de paths en utilidades y tests.

Los nombres son lógicos: `"/schemas/user.json"` o `"profiles.json"`. Si el
fichero está en una subcarpeta, la carpeta va en el nombre.
"""

from __future__ import annotations

import os
from pathlib import Path

from core.config import AppSettings


def _project_root() -> Path:
    # core/resources_loader.py -> core -> src -> <project_root>
    return Path(__file__).resolve().parents[2]


def candidate_dirs(settings: AppSettings | None = None) -> list[Path]:
    """Raíces donde se buscan recursos.

    Orden:
    1) `settings.resources_dir` (REST_HARNESS_RESOURCES_DIR)
    2) <project_root>/resources
    3) ./resources (cwd)
    4) ./ (cwd)
    """

    settings = settings or AppSettings()
    dirs: list[Path] = []
    if settings.resources_dir is not None:
        dirs.append(Path(settings.resources_dir))
    dirs.extend(
        [
            _project_root() / "resources",
            Path.cwd() / "resources",
            Path.cwd(),
        ]
    )
    return dirs


def resolve_resource(name: str, settings: AppSettings | None = None) -> Path:
    """Resuelve un nombre lógico a un fichero existente.

    Lanza `FileNotFoundError` si ninguna raíz lo contiene.
    """

    relative = name.replace("\\", "/").lstrip("/")
    if not relative:
        raise FileNotFoundError("Empty resource name")

    for base in candidate_dirs(settings):
        p = base / relative
        if p.exists() and p.is_file():
            return p
    searched = os.pathsep.join(str(d) for d in candidate_dirs(settings))
    raise FileNotFoundError(f"Resource '{name}' not found (searched: {searched})")


def read_resource_text(name: str, settings: AppSettings | None = None) -> str:
    return resolve_resource(name, settings).read_text(encoding="utf-8")
