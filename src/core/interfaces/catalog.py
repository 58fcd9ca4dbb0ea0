"""Contrato del catálogo remoto de mods.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el pipeline se teste con catálogos en memoria sin tocar la red.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import ModReference, ModsPage


@runtime_checkable
class ModCatalog(Protocol):
    """Contrato mínimo para buscar mods por name_id.

    Reglas de diseño:
    - `fetch_mods_by_name` es asíncrono porque hace I/O (HTTP).
    - Una sola request por llamada, sin reintentos.
    - Los fallos de transporte/deserialización se levantan como
      `adapters.modio_client.ModioRequestError`.
    """

    async def fetch_mods_by_name(self, reference: ModReference) -> ModsPage:
        """Devuelve los mods visibles cuyo name_id coincide con la referencia."""

        ...
