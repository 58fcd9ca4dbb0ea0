"""Carga de recursos de la corrida (lista de mods y token).

Este módulo vive en `core/` porque:
- centraliza el *qué* necesita la corrida (texto de entrada + credencial)
  sin acoplarse a la CLI
- los fallos aquí son los únicos que abortan la corrida, antes de empezar
  a consultar mod.io.
"""

from __future__ import annotations

from pathlib import Path


class ResourceLoadError(RuntimeError):
    """No se pudo leer un recurso obligatorio (lista de mods o token)."""


def _read_text(path: Path, *, what: str) -> str:
    if not path.exists():
        raise ResourceLoadError(f"{what} `{path}` does not exist")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ResourceLoadError(f"could not read {what} `{path}`: {exc}") from exc


def load_mod_list(path: Path) -> str:
    """Texto crudo de la lista de mods (una URL por línea)."""

    return _read_text(path, what="mod list")


def load_access_token(path: Path) -> str:
    """Token OAuth2 de mod.io, sin espacios ni saltos de línea alrededor."""

    token = _read_text(path, what="access token file").strip()
    if not token:
        raise ResourceLoadError(f"access token file `{path}` is empty")
    return token
