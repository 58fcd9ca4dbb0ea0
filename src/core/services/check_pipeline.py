"""Batch validation of mod references against the mod.io catalog.

This module owns the checking flow: per-reference validation rules and the
chunked scheduler that keeps the run under mod.io's rate limit. The CLI only
renders what the hooks report, which keeps side-effects (printing, progress
bars) out of the core logic and makes the loop testable without sleeping.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterator, Sequence, TypeVar, Union

from adapters.modio_client import ModioRequestError
from core.domain.models import (
    AmbiguousModUrl,
    CheckError,
    CheckResult,
    Mod,
    ModioError,
    ModNotFound,
    ModReference,
)
from core.interfaces.catalog import ModCatalog

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 30
DEFAULT_COOLDOWN_SECONDS = 60.0

T = TypeVar("T")

CheckOutcome = Union[Mod, CheckError]


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, cooldown notices, cancellation)."""

    checked: Callable[[ModReference, CheckOutcome], None] | None = None
    cooldown: Callable[[float], None] | None = None
    cancelled: Callable[[], bool] | None = None


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield contiguous slices of at most `size` items."""

    if size < 1:
        raise ValueError(f"chunk size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def check_reference(catalog: ModCatalog, reference: ModReference) -> CheckOutcome:
    """Resolve one reference to a single visible mod or a `CheckError`."""

    try:
        page = await catalog.fetch_mods_by_name(reference)
    except ModioRequestError as exc:
        return ModioError(reference=reference, status_code=exc.status_code, detail=str(exc))

    mods = list(page.data)
    if not mods:
        return ModNotFound(reference=reference)

    candidate = mods.pop()
    if mods:
        return AmbiguousModUrl(reference=reference)

    return candidate


def _stop_requested(hooks: PipelineHooks, result: CheckResult, total: int) -> bool:
    if hooks.cancelled is None or not hooks.cancelled():
        return False
    logger.info("run cancelled after %d/%d references", result.checked, total)
    result.cancelled = True
    return True


async def check_references(
    catalog: ModCatalog,
    references: Sequence[ModReference],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
    hooks: PipelineHooks | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> CheckResult:
    """Check every reference, one request at a time, pausing between full chunks.

    A pause follows every chunk of exactly `chunk_size` references except the
    last chunk of the run. Individual failures are recorded in the result and
    never abort the run.

    `hooks.cancelled` is polled before each request and before each pause, so a
    cancelled run returns the partial result without sleeping.
    """

    hooks = hooks or PipelineHooks()
    result = CheckResult()

    chunks = list(chunked(references, chunk_size))
    for index, chunk in enumerate(chunks):
        for reference in chunk:
            if _stop_requested(hooks, result, len(references)):
                return result
            logger.debug("checking %s...", reference.url)
            outcome = await check_reference(catalog, reference)
            result.checked += 1
            if isinstance(outcome, Mod):
                logger.debug("OK %s -> %s", reference.url, outcome.profile_url)
                result.valid += 1
            else:
                logger.debug("INVALID %r", outcome)
                result.errors.append(outcome)
            if hooks.checked:
                hooks.checked(reference, outcome)

        is_last = index == len(chunks) - 1
        if len(chunk) == chunk_size and not is_last:
            if _stop_requested(hooks, result, len(references)):
                return result
            logger.debug("sleeping %s seconds to avoid rate-limit", cooldown_seconds)
            if hooks.cooldown:
                hooks.cooldown(cooldown_seconds)
            await sleep(cooldown_seconds)
            result.cooldowns += 1

    return result
