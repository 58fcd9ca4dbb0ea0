"""Exportación del reporte de errores (`errors.log`).

Por qué está en adapters:
- Es un detalle de infraestructura (archivo de texto).
- El Core solo conoce el agregado `CheckResult` y sus `CheckError`.

Formato (una línea por error, en el orden registrado):
    ERROR <status:<10> <url>
donde status es el código HTTP, `ambiguous`, o `---` si no hay código.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.domain.models import AmbiguousModUrl, CheckError, error_status, error_url

NO_STATUS_PLACEHOLDER = "---"
AMBIGUOUS_MARKER = "ambiguous"


def status_label(error: CheckError) -> str:
    if isinstance(error, AmbiguousModUrl):
        return AMBIGUOUS_MARKER
    status = error_status(error)
    return str(status) if status is not None else NO_STATUS_PLACEHOLDER


def format_error_line(error: CheckError) -> str:
    return f"ERROR {status_label(error):<10} {error_url(error)}"


def render_error_log(errors: Iterable[CheckError]) -> str:
    return "".join(format_error_line(e) + "\n" for e in errors)


def write_error_log(*, errors: Iterable[CheckError], output_path: Path) -> Path:
    """Escribe el reporte; siempre crea el archivo, vacío si no hubo errores."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_error_log(errors), encoding="utf-8")
    return output_path
