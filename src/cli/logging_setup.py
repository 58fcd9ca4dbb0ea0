"""Logging a stderr con Rich.

Nivel: `--log-level` > `MODCHECK_LOG_LEVEL` (AppSettings) > INFO.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO") -> None:
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=resolved,
        format="%(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )
    # httpx loguea cada request en INFO; solo lo queremos en DEBUG.
    logging.getLogger("httpx").setLevel(logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING)

    logging.getLogger(__name__).debug("logging setup (level=%s)", logging.getLevelName(resolved))
