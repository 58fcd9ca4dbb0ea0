"""Extracción de referencias a mods desde texto plano.

Reglas:
- Una referencia por línea; las líneas que no matchean el patrón se descartan
  sin error.
- Solo se colapsan duplicados *adyacentes* (misma línea repetida seguida).
  Una línea inválida intermedia rompe la adyacencia, así que repeticiones no
  consecutivas se conservan.
"""

from __future__ import annotations

import re
from typing import Iterable

from core.domain.models import ModReference

DEFAULT_MOD_URL_HOST = "mod.io"
DEFAULT_MOD_URL_GAME_PATH = "g/drg/m"


def compile_mod_url_pattern(
    host: str = DEFAULT_MOD_URL_HOST,
    game_path: str = DEFAULT_MOD_URL_GAME_PATH,
) -> re.Pattern[str]:
    """Compila el patrón `https://<host>/<game_path>/<name_id>[#<mod_id>[/<modfile_id>]]`."""

    prefix = f"https://{re.escape(host)}/{re.escape(game_path.strip('/'))}/"
    return re.compile(
        "^"
        + prefix
        + r"(?P<name_id>[^/#]+)(?:#(?P<mod_id>\d+)(?:/(?P<modfile_id>\d+))?)?$"
    )


def parse_reference(line: str, pattern: re.Pattern[str]) -> ModReference | None:
    """Parsea una línea; devuelve None si no es una URL de mod válida."""

    text = line.strip()
    match = pattern.match(text)
    if match is None:
        return None

    mod_id = match.group("mod_id")
    modfile_id = match.group("modfile_id")
    return ModReference(
        url=text,
        name_id=match.group("name_id"),
        mod_id=int(mod_id) if mod_id is not None else None,
        modfile_id=int(modfile_id) if modfile_id is not None else None,
    )


def dedupe_adjacent(lines: Iterable[str]) -> list[str]:
    """Colapsa líneas idénticas consecutivas conservando el orden."""

    out: list[str] = []
    for line in lines:
        if out and out[-1] == line:
            continue
        out.append(line)
    return out


def extract_references(text: str, pattern: re.Pattern[str]) -> list[ModReference]:
    lines = dedupe_adjacent(raw.strip() for raw in text.splitlines())
    references: list[ModReference] = []
    for line in lines:
        reference = parse_reference(line, pattern)
        if reference is not None:
            references.append(reference)
    return references
