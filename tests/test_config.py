"""Unit tests for settings and the per-user .env helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import AppSettings, get_user_config_dir, write_user_env_vars


def test_defaults(settings: AppSettings) -> None:
    assert settings.chunk_size == 30
    assert settings.cooldown_seconds == 60
    assert settings.game_id == 2475
    assert settings.api_host == "modapi.io"
    assert settings.mod_url_host == "mod.io"
    assert settings.mod_url_game_path == "g/drg/m"
    assert settings.errors_log_path == Path("errors.log")
    assert settings.user_id is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODCHECK_CHUNK_SIZE", "10")
    monkeypatch.setenv("MODCHECK_COOLDOWN_SECONDS", "2.5")
    monkeypatch.setenv("MODCHECK_USER_ID", "1234")
    settings = AppSettings(_env_file=None)
    assert settings.chunk_size == 10
    assert settings.cooldown_seconds == 2.5
    assert settings.user_id == 1234


def test_dotenv_in_cwd_is_read(isolated_env: Path) -> None:
    (isolated_env / ".env").write_text("MODCHECK_GAME_ID=99\n", encoding="utf-8")
    assert AppSettings().game_id == 99


@pytest.mark.parametrize(
    ("field", "value"),
    [("chunk_size", 0), ("cooldown_seconds", -1), ("http_timeout_seconds", 0)],
)
def test_invalid_values_rejected(field: str, value: float) -> None:
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, **{field: value})


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="XDG layout only")
class TestUserEnv:
    def test_config_dir_follows_xdg(self, isolated_env: Path) -> None:
        assert get_user_config_dir() == isolated_env / "xdg" / "modcheck"

    def test_write_and_merge(self, isolated_env: Path) -> None:
        path = write_user_env_vars({"MODCHECK_USER_ID": "1"})
        write_user_env_vars({"MODCHECK_GAME_ID": "2475"})

        assert path == isolated_env / "xdg" / "modcheck" / ".env"
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("#")
        assert lines[1:] == ["MODCHECK_GAME_ID=2475", "MODCHECK_USER_ID=1"]
