"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP mod.io) y el pipeline lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "modcheck"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "modcheck"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "modcheck"
    return Path.home() / ".config" / "modcheck"


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

    lines = ["# modcheck user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="MODCHECK_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="modcheck/0.2 (+https://local)",
        min_length=1,
        description="User-Agent para peticiones a mod.io.",
    )

    # API mod.io
    api_host: str = Field(
        default="modapi.io",
        min_length=1,
        description="Host de la API; la URL final es https://u-<user_id>.<api_host>.",
    )
    game_id: int = Field(
        default=2475,
        ge=0,
        description="Id del juego en mod.io (2475 = Deep Rock Galactic).",
    )
    user_id: int | None = Field(
        default=None,
        ge=0,
        description="Id de usuario mod.io por defecto (si no se pasa --id).",
    )

    # Patrón de URLs de la lista de entrada
    mod_url_host: str = Field(
        default="mod.io",
        min_length=1,
        description="Host de las URLs de perfil de mods en la lista.",
    )
    mod_url_game_path: str = Field(
        default="g/drg/m",
        min_length=1,
        description="Path fijo entre el host y el name_id del mod.",
    )

    # Rate limit
    chunk_size: int = Field(
        default=30,
        ge=1,
        description="Cantidad de mods verificados antes de cada pausa.",
    )
    cooldown_seconds: float = Field(
        default=60.0,
        ge=0,
        description="Pausa entre chunks completos para no disparar el rate limit de mod.io.",
    )

    errors_log_path: Path = Field(
        default=Path("errors.log"),
        description="Ruta del reporte de errores.",
    )
    log_level: str = Field(
        default="INFO",
        min_length=1,
        description="Nivel de logging (DEBUG, INFO, WARNING...).",
    )
