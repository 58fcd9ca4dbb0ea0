"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- La respuesta de mod.io se deserializa directamente a `ModsPage`.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ModReference(BaseModel):
    """Referencia a un mod extraída de una línea de la lista.

    Inmutable: una vez extraída no cambia durante la corrida.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        ...,
        min_length=1,
        description="Texto original de la línea (se usa en el reporte).",
    )
    name_id: str = Field(
        ...,
        min_length=1,
        pattern=r"^[^/#]+$",
        description="Slug del mod (name_id en mod.io).",
    )
    mod_id: int | None = Field(
        default=None,
        ge=0,
        description="Id numérico del mod si la URL lo incluye (`#<mod_id>`).",
    )
    modfile_id: int | None = Field(
        default=None,
        ge=0,
        description="Id numérico del archivo si la URL lo incluye (`#<mod_id>/<modfile_id>`).",
    )


class Mod(BaseModel):
    """Un mod devuelto por la API de mod.io."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., ge=0, le=2**32 - 1)
    visible: int = Field(..., ge=0, le=2**32 - 1)
    profile_url: str = Field(..., description="URL canónica del perfil del mod.")


class ModsPage(BaseModel):
    """Respuesta de `GET /games/{game_id}/mods` (solo el campo `data`)."""

    model_config = ConfigDict(extra="ignore")

    data: list[Mod] = Field(...)


class ModNotFound(BaseModel):
    """mod.io no devolvió ningún mod visible para el name_id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["not_found"] = "not_found"
    reference: ModReference


class ModioError(BaseModel):
    """Fallo de transporte o de deserialización al consultar mod.io."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["modio_error"] = "modio_error"
    reference: ModReference
    status_code: int | None = Field(
        default=None,
        description="Código HTTP si mod.io respondió; None en timeouts/errores de conexión.",
    )
    detail: str = Field(default="", description="Mensaje del error subyacente.")


class AmbiguousModUrl(BaseModel):
    """Más de un mod visible comparte el name_id: la URL no identifica uno solo."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ambiguous"] = "ambiguous"
    reference: ModReference


CheckError = Annotated[
    Union[ModNotFound, ModioError, AmbiguousModUrl],
    Field(discriminator="kind"),
]


def error_url(error: CheckError) -> str:
    """URL original de la referencia que falló."""

    if isinstance(error, (ModNotFound, ModioError, AmbiguousModUrl)):
        return error.reference.url
    raise TypeError(f"unknown check error: {error!r}")


def error_status(error: CheckError) -> int | None:
    """Código de estado asociado al error (404 para not found, None si no hay)."""

    if isinstance(error, ModNotFound):
        return 404
    if isinstance(error, ModioError):
        return error.status_code
    if isinstance(error, AmbiguousModUrl):
        return None
    raise TypeError(f"unknown check error: {error!r}")


class CheckResult(BaseModel):
    """Agregado de una corrida completa.

    Por qué un agregado:
    - El pipeline acumula errores en orden (append-only) y el reporte se
      escribe al final a partir de este objeto.
    """

    errors: list[CheckError] = Field(
        default_factory=list,
        description="Errores en el orden en que se registraron.",
    )
    checked: int = Field(default=0, ge=0, description="Referencias verificadas.")
    valid: int = Field(default=0, ge=0, description="Referencias que resolvieron a un único mod.")
    cooldowns: int = Field(default=0, ge=0, description="Pausas tomadas entre chunks.")
    cancelled: bool = Field(default=False, description="La corrida se detuvo antes de terminar.")
