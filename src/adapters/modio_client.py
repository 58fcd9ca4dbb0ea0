"""Cliente del catálogo mod.io.

Una request por referencia:
- `GET https://u-<user_id>.<api_host>/v1/games/<game_id>/mods?visible=1&name_id=<name_id>`
- Bearer token + `accept: application/json`.

Sin reintentos: el rate limit lo gestiona el pipeline con pausas entre chunks.
"""

from __future__ import annotations

import logging
from types import TracebackType

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import ModReference, ModsPage
from core.interfaces.catalog import ModCatalog

logger = logging.getLogger(__name__)


class ModioRequestError(RuntimeError):
    """Fallo de transporte o deserialización al consultar mod.io.

    `status_code` es None cuando mod.io no llegó a responder (timeout,
    conexión) o cuando la respuesta no se pudo deserializar.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ModioClient(ModCatalog):
    """Implementación HTTP de `ModCatalog` contra la API de mod.io."""

    def __init__(
        self,
        *,
        user_id: int,
        token: str,
        settings: AppSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._user_id = user_id
        self._token = token
        self._owns_client = client is None
        self._client = client or build_async_client(self._settings)

    @property
    def base_url(self) -> str:
        return f"https://u-{self._user_id}.{self._settings.api_host}/v1"

    @property
    def mods_url(self) -> str:
        return f"{self.base_url}/games/{self._settings.game_id}/mods"

    async def fetch_mods_by_name(self, reference: ModReference) -> ModsPage:
        params = {"visible": "1", "name_id": reference.name_id}
        headers = {
            "accept": "application/json",
            "Authorization": f"Bearer {self._token}",
        }

        try:
            response = await self._client.get(self.mods_url, params=params, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            # InvalidURL no hereda de HTTPError (p.ej. query demasiado larga).
            logger.debug("request failed for <%s>: %r", reference.url, exc)
            raise ModioRequestError(str(exc) or exc.__class__.__name__) from exc

        if response.is_error:
            logger.debug("mod.io returned %s for <%s>", response.status_code, reference.url)
            raise ModioRequestError(
                f"HTTP {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            return ModsPage.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.debug("invalid mod.io payload for <%s>: %s", reference.url, exc)
            raise ModioRequestError(f"invalid response body: {exc}") from exc

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ModioClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
