"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.resources_loader import ResourceLoadError, load_access_token

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


def _check_token(path: Path | None) -> tuple[str, str]:
    if path is None:
        return "SKIPPED", "pass --access-token to check the token file"
    try:
        token = load_access_token(path)
    except ResourceLoadError as exc:
        return "FAIL", str(exc)
    return "OK", f"{len(token)} characters"


@app.command()
def run(
    access_token: Path | None = typer.Option(None, "--access-token", help="Token file to validate."),
    user_id: int | None = typer.Option(None, "--id", help="mod.io user id used for the API host."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="modcheck Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Game id", "OK", str(settings.game_id))
    table.add_row("Mod URL prefix", "OK", f"https://{settings.mod_url_host}/{settings.mod_url_game_path}/")
    table.add_row(
        "Rate limit",
        "OK",
        f"{settings.chunk_size} mods, then {settings.cooldown_seconds:g}s cooldown",
    )

    effective_user_id = user_id if user_id is not None else settings.user_id
    if effective_user_id is None:
        table.add_row("User id", "MISSING", "pass --id or run `doctor set-user`")
    else:
        table.add_row("User id", "OK", str(effective_user_id))

    token_status, token_detail = _check_token(access_token)
    table.add_row("Access token", token_status, token_detail)

    # Connectivity (best-effort)
    host = f"u-{effective_user_id}.{settings.api_host}" if effective_user_id is not None else settings.api_host
    ok_http, detail_http = asyncio.run(_check_http(f"https://{host}/v1", settings))
    table.add_row("API connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] every mod will be reported as `ERROR ---` while the API is unreachable."
        )


@app.command(name="set-user")
def set_user() -> None:
    """Store a default mod.io user id in the user config .env."""

    user_id = typer.prompt("mod.io user id", type=int)
    if user_id < 0:
        raise typer.BadParameter("user id must be >= 0")

    env_path = write_user_env_vars({"MODCHECK_USER_ID": str(user_id)})
    _console.print(f"[green]Saved user id to:[/green] {env_path}")
