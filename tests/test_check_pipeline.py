"""Unit tests for the validation rules and the chunked scheduler.

The catalog is an in-memory fake and the cooldown sleep is recorded instead of
awaited, so these tests never touch the network or wait.
"""

from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from adapters.modio_client import ModioRequestError
from core.domain.models import (
    AmbiguousModUrl,
    Mod,
    ModioError,
    ModNotFound,
    ModReference,
    ModsPage,
)
from core.services.check_pipeline import (
    PipelineHooks,
    check_reference,
    check_references,
    chunked,
)


class FakeCatalog:
    """Returns canned pages per name_id and records the call order."""

    def __init__(self, pages: dict[str, list[Mod] | Exception] | None = None) -> None:
        self.pages = pages or {}
        self.calls: list[str] = []
        self.events: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_mods_by_name(self, reference: ModReference) -> ModsPage:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.calls.append(reference.name_id)
            self.events.append(f"fetch:{reference.name_id}")
            await asyncio.sleep(0)
            page = self.pages.get(reference.name_id, [])
            if isinstance(page, Exception):
                raise page
            return ModsPage(data=list(page))
        finally:
            self.in_flight -= 1


class RecordingSleep:
    def __init__(self, events: list[str] | None = None) -> None:
        self.calls: list[float] = []
        self.events = events

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.events is not None:
            self.events.append(f"sleep:{seconds:g}")


def _refs(make_reference: Callable[[str], ModReference], count: int) -> list[ModReference]:
    return [make_reference(f"mod-{i}") for i in range(count)]


# =============================================================================
# check_reference
# =============================================================================


class TestCheckReference:
    def test_empty_page_is_not_found(self, make_reference) -> None:
        ref = make_reference("gone")
        outcome = asyncio.run(check_reference(FakeCatalog(), ref))
        assert outcome == ModNotFound(reference=ref)

    def test_single_mod_is_success(self, make_reference, make_mod) -> None:
        ref = make_reference("foo")
        mod = make_mod(7, "foo")
        outcome = asyncio.run(check_reference(FakeCatalog({"foo": [mod]}), ref))
        assert outcome == mod

    @pytest.mark.parametrize("count", [2, 3, 10])
    def test_several_mods_is_ambiguous(self, make_reference, make_mod, count: int) -> None:
        ref = make_reference("foo")
        catalog = FakeCatalog({"foo": [make_mod(i) for i in range(count)]})
        outcome = asyncio.run(check_reference(catalog, ref))
        assert isinstance(outcome, AmbiguousModUrl)
        assert outcome.reference == ref

    def test_request_error_with_status(self, make_reference) -> None:
        ref = make_reference("foo")
        catalog = FakeCatalog({"foo": ModioRequestError("HTTP 429", status_code=429)})
        outcome = asyncio.run(check_reference(catalog, ref))
        assert isinstance(outcome, ModioError)
        assert outcome.status_code == 429
        assert outcome.detail == "HTTP 429"

    def test_request_error_without_status(self, make_reference) -> None:
        ref = make_reference("foo")
        catalog = FakeCatalog({"foo": ModioRequestError("timed out")})
        outcome = asyncio.run(check_reference(catalog, ref))
        assert isinstance(outcome, ModioError)
        assert outcome.status_code is None

    def test_other_exceptions_propagate(self, make_reference) -> None:
        catalog = FakeCatalog({"foo": KeyError("boom")})
        with pytest.raises(KeyError):
            asyncio.run(check_reference(catalog, make_reference("foo")))


# =============================================================================
# chunked
# =============================================================================


class TestChunked:
    def test_partial_last_chunk(self) -> None:
        assert [list(c) for c in chunked([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]

    def test_empty(self) -> None:
        assert list(chunked([], 30)) == []

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            list(chunked([1], 0))


# =============================================================================
# check_references (scheduler)
# =============================================================================


class TestCooldowns:
    @pytest.mark.parametrize(
        ("length", "chunk_size", "expected_pauses"),
        [
            (0, 30, 0),
            (1, 30, 0),
            (29, 30, 0),
            (30, 30, 0),
            (31, 30, 1),
            (60, 30, 1),
            (61, 30, 2),
            (90, 30, 2),
            (5, 2, 2),
            (6, 2, 2),
        ],
    )
    def test_pause_count(self, make_reference, length: int, chunk_size: int, expected_pauses: int) -> None:
        sleep = RecordingSleep()
        result = asyncio.run(
            check_references(
                FakeCatalog(),
                _refs(make_reference, length),
                chunk_size=chunk_size,
                cooldown_seconds=60,
                sleep=sleep,
            )
        )
        assert sleep.calls == [60] * expected_pauses
        assert result.cooldowns == expected_pauses
        assert result.checked == length

    def test_pause_sits_between_chunks(self, make_reference) -> None:
        catalog = FakeCatalog()
        sleep = RecordingSleep(catalog.events)
        asyncio.run(
            check_references(catalog, _refs(make_reference, 31), chunk_size=30, sleep=sleep)
        )
        assert catalog.events.index("sleep:60") == 30
        assert catalog.events[-1] == "fetch:mod-30"

    def test_defaults_are_30_and_60(self, make_reference) -> None:
        sleep = RecordingSleep()
        asyncio.run(check_references(FakeCatalog(), _refs(make_reference, 31), sleep=sleep))
        assert sleep.calls == [60]


class TestRunSemantics:
    def test_failures_recorded_in_order_and_run_continues(self, make_reference, make_mod) -> None:
        refs = [make_reference(n) for n in ("ok", "missing", "dupe", "broken", "ok2")]
        catalog = FakeCatalog(
            {
                "ok": [make_mod(1)],
                "dupe": [make_mod(2), make_mod(3)],
                "broken": ModioRequestError("HTTP 500", status_code=500),
                "ok2": [make_mod(4)],
            }
        )
        result = asyncio.run(check_references(catalog, refs, sleep=RecordingSleep()))

        assert catalog.calls == ["ok", "missing", "dupe", "broken", "ok2"]
        assert [type(e) for e in result.errors] == [ModNotFound, AmbiguousModUrl, ModioError]
        assert [e.reference.name_id for e in result.errors] == ["missing", "dupe", "broken"]
        assert result.checked == 5
        assert result.valid == 2
        assert not result.cancelled

    def test_all_valid_yields_no_errors(self, make_reference, make_mod) -> None:
        refs = _refs(make_reference, 3)
        catalog = FakeCatalog({r.name_id: [make_mod(i)] for i, r in enumerate(refs)})
        result = asyncio.run(check_references(catalog, refs, sleep=RecordingSleep()))
        assert result.errors == []
        assert result.valid == 3

    def test_requests_are_strictly_sequential(self, make_reference) -> None:
        catalog = FakeCatalog()
        asyncio.run(
            check_references(catalog, _refs(make_reference, 12), chunk_size=5, sleep=RecordingSleep())
        )
        assert catalog.max_in_flight == 1
        assert catalog.calls == [f"mod-{i}" for i in range(12)]

    def test_hooks_are_called(self, make_reference, make_mod) -> None:
        seen: list[tuple[str, str]] = []
        cooldowns: list[float] = []
        hooks = PipelineHooks(
            checked=lambda ref, outcome: seen.append((ref.name_id, type(outcome).__name__)),
            cooldown=cooldowns.append,
        )
        refs = [make_reference("a"), make_reference("b"), make_reference("c")]
        catalog = FakeCatalog({"a": [make_mod(1)]})
        asyncio.run(
            check_references(
                catalog, refs, chunk_size=2, cooldown_seconds=1.5, hooks=hooks, sleep=RecordingSleep()
            )
        )
        assert seen == [("a", "Mod"), ("b", "ModNotFound"), ("c", "ModNotFound")]
        assert cooldowns == [1.5]

    def test_cancellation_at_chunk_boundary_skips_the_pause(self, make_reference) -> None:
        catalog = FakeCatalog()
        sleep = RecordingSleep()
        hooks = PipelineHooks(cancelled=lambda: len(catalog.calls) >= 3)
        result = asyncio.run(
            check_references(catalog, _refs(make_reference, 10), chunk_size=3, hooks=hooks, sleep=sleep)
        )
        assert result.cancelled
        assert result.checked == 3
        assert len(catalog.calls) == 3
        assert sleep.calls == []
        assert result.cooldowns == 0

    def test_cancellation_after_second_request(self, make_reference) -> None:
        catalog = FakeCatalog()
        sleep = RecordingSleep()
        hooks = PipelineHooks(cancelled=lambda: len(catalog.calls) >= 2)
        result = asyncio.run(
            check_references(catalog, _refs(make_reference, 4), chunk_size=2, hooks=hooks, sleep=sleep)
        )
        assert result.cancelled
        assert result.checked == 2
        assert len(result.errors) == 2
        assert sleep.calls == []

    def test_cancellation_mid_chunk(self, make_reference) -> None:
        catalog = FakeCatalog()
        hooks = PipelineHooks(cancelled=lambda: len(catalog.calls) >= 1)
        result = asyncio.run(
            check_references(
                catalog, _refs(make_reference, 5), chunk_size=3, hooks=hooks, sleep=RecordingSleep()
            )
        )
        assert result.cancelled
        assert result.checked == 1

    def test_cancellation_during_pause_stops_next_chunk(self, make_reference) -> None:
        catalog = FakeCatalog()
        paused: list[float] = []

        async def sleep(seconds: float) -> None:
            paused.append(seconds)

        hooks = PipelineHooks(cancelled=lambda: bool(paused))
        result = asyncio.run(
            check_references(catalog, _refs(make_reference, 6), chunk_size=2, hooks=hooks, sleep=sleep)
        )
        assert result.cancelled
        assert result.checked == 2
        assert result.cooldowns == 1

    def test_invalid_chunk_size(self, make_reference) -> None:
        with pytest.raises(ValueError):
            asyncio.run(check_references(FakeCatalog(), _refs(make_reference, 1), chunk_size=0))
