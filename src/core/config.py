"""Configuración del harness.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- El `RestClient` recibe la configuración explícita en su constructor: nada de
  flags globales de proceso (redirects, charset).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "rest-harness"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "rest-harness"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "rest-harness"
    return Path.home() / ".config" / "rest-harness"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# rest-harness user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central del harness.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars).
    - Un único contrato de configuración para CLI y `RestClient`.
    """

    model_config = SettingsConfigDict(
        env_prefix="REST_HARNESS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    env: str | None = Field(
        default=None,
        validation_alias=AliasChoices("REST_HARNESS_ENV", "env"),
        description="Base URI del entorno bajo test (p.ej. https://api.staging.local).",
    )
    follow_redirects: bool = Field(
        default=False,
        description="Seguir redirects automáticamente.",
    )
    default_charset: str = Field(
        default="utf-8",
        min_length=1,
        description="Charset para codificar bodies cuando el Content-Type no declara uno.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    verify_tls: bool = Field(
        default=True,
        description="Verificar certificados TLS (desactivar sólo en entornos de test).",
    )
    user_agent: str = Field(
        default="rest-harness/0.1",
        min_length=1,
        description="User-Agent de las peticiones.",
    )
    client_id: str = Field(
        default="rms-ui",
        min_length=1,
        description="Valor del header X-Client-Id que siembra `Request.generate`.",
    )
    resources_dir: Path | None = Field(
        default=None,
        description="Directorio raíz de fixtures JSON (schemas, perfiles).",
    )
    log_level: str = Field(
        default="INFO",
        description="Nivel de logging de la CLI.",
    )
