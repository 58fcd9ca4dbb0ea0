"""Shared pytest fixtures for modcheck tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import httpx
import pytest

from core.config import AppSettings
from core.domain.models import Mod, ModReference


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test from an empty directory without MODCHECK_* variables."""
    for key in list(os.environ):
        if key.upper().startswith("MODCHECK_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def make_reference() -> Callable[[str], ModReference]:
    def _make(name_id: str) -> ModReference:
        return ModReference(url=f"https://mod.io/g/drg/m/{name_id}", name_id=name_id)

    return _make


@pytest.fixture
def make_mod() -> Callable[..., Mod]:
    def _make(mod_id: int, name_id: str = "mod") -> Mod:
        return Mod(id=mod_id, visible=1, profile_url=f"https://mod.io/g/drg/m/{name_id}")

    return _make


def mods_payload(*ids: int) -> dict[str, object]:
    return {
        "data": [
            {"id": i, "visible": 1, "profile_url": f"https://mod.io/g/drg/m/mod-{i}"} for i in ids
        ]
    }


def json_handler(routes: dict[str, tuple[int, object]]) -> Callable[[httpx.Request], httpx.Response]:
    """Answer mod queries by `name_id`; unknown names get an empty page."""

    def handler(request: httpx.Request) -> httpx.Response:
        name_id = request.url.params.get("name_id", "")
        status, payload = routes.get(name_id, (200, {"data": []}))
        return httpx.Response(status, json=payload)

    return handler
