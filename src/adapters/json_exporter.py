"""Exportación JSON del resultado de la corrida.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines (CI, bots de Discord...).
- Conserva el detalle de cada error (name_id, ids, status, mensaje) que el
  `errors.log` plano no incluye.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import CheckResult


def export_result_json(*, result: CheckResult, output_path: Path) -> Path:
    """Exporta `CheckResult` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = result.model_dump(mode="json")
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
