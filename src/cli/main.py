"""CLI principal (Typer).

Comandos:
- `check`: valida una lista de URLs de mods contra mod.io y escribe `errors.log`.
- `doctor`: diagnóstico de configuración y conectividad.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from pathlib import Path
from typing import Callable

import typer
from rich.console import Console

from adapters.error_log import write_error_log
from adapters.http_client import build_async_client
from adapters.json_exporter import export_result_json
from adapters.modio_client import ModioClient
from cli import doctor
from cli.logging_setup import setup_logging
from cli.ui_components import (
    build_progress,
    build_summary_table,
    format_cooldown_text,
    format_error_text,
    print_banner,
)
from core.config import AppSettings
from core.domain.models import CheckResult, Mod, ModReference
from core.domain.references import compile_mod_url_pattern, extract_references
from core.resources_loader import ResourceLoadError, load_access_token, load_mod_list
from core.services.check_pipeline import CheckOutcome, PipelineHooks, check_references

app = typer.Typer(no_args_is_help=True, help="Validate mod.io mod lists against the mod.io API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
logger = logging.getLogger(__name__)


def _install_sigint_handler(stop: asyncio.Event) -> Callable[[], None]:
    """Primer Ctrl+C: parada ordenada al terminar la request en curso.

    El segundo Ctrl+C vuelve al comportamiento por defecto (KeyboardInterrupt).
    Devuelve una función que restaura el handler previo.
    """

    loop = asyncio.get_running_loop()
    previous = signal.getsignal(signal.SIGINT)
    if previous is None:
        previous = signal.default_int_handler

    def handler(signum: int, frame: object) -> None:
        signal.signal(signal.SIGINT, previous)
        loop.call_soon_threadsafe(stop.set)

    try:
        signal.signal(signal.SIGINT, handler)
    except ValueError:
        # Solo el hilo principal puede instalar handlers.
        logger.debug("SIGINT handler not installed: not in the main thread")
        return lambda: None

    return lambda: signal.signal(signal.SIGINT, previous)


async def _run_check(
    *,
    settings: AppSettings,
    references: list[ModReference],
    user_id: int,
    token: str,
) -> CheckResult:
    progress = build_progress(_console)
    task_id = progress.add_task("Checking", total=len(references), current="")

    def on_checked(reference: ModReference, outcome: CheckOutcome) -> None:
        if not isinstance(outcome, Mod):
            progress.console.print(format_error_text(outcome))
        progress.update(task_id, advance=1, current=reference.name_id)

    def on_cooldown(seconds: float) -> None:
        progress.console.print(format_cooldown_text(seconds))

    stop = asyncio.Event()

    async def cooldown_sleep(seconds: float) -> None:
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop.wait(), timeout=seconds)

    hooks = PipelineHooks(checked=on_checked, cooldown=on_cooldown, cancelled=stop.is_set)

    restore_sigint = _install_sigint_handler(stop)
    try:
        async with build_async_client(settings) as http_client:
            catalog = ModioClient(user_id=user_id, token=token, settings=settings, client=http_client)
            with progress:
                return await check_references(
                    catalog,
                    references,
                    chunk_size=settings.chunk_size,
                    cooldown_seconds=settings.cooldown_seconds,
                    hooks=hooks,
                    sleep=cooldown_sleep,
                )
    finally:
        restore_sigint()


@app.command()
def check(
    mod_list: Path = typer.Argument(..., help="Text file with one mod.io URL per line."),
    user_id: int | None = typer.Option(None, "--id", help="mod.io user id (u-<id>.modapi.io)."),
    access_token: Path = typer.Option(
        ..., "--access-token", help="File containing the mod.io OAuth2 access token."
    ),
    errors_log: Path | None = typer.Option(None, "--errors-log", help="Where to write the error report."),
    json_out: Path | None = typer.Option(None, "--json-out", help="Also export the full result as JSON."),
    chunk_size: int | None = typer.Option(None, "--chunk-size", min=1, help="Mods checked per chunk."),
    cooldown: float | None = typer.Option(
        None, "--cooldown", min=0, help="Seconds to wait after each full chunk."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING..."),
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the welcome banner."),
) -> None:
    """Check every mod URL in MOD_LIST and report missing/ambiguous/rejected mods."""

    settings = AppSettings()
    overrides: dict[str, object] = {}
    if chunk_size is not None:
        overrides["chunk_size"] = chunk_size
    if cooldown is not None:
        overrides["cooldown_seconds"] = cooldown
    if errors_log is not None:
        overrides["errors_log_path"] = errors_log
    if overrides:
        settings = settings.model_copy(update=overrides)

    setup_logging(log_level or settings.log_level)

    if banner:
        print_banner(_console)

    effective_user_id = user_id if user_id is not None else settings.user_id
    if effective_user_id is None:
        _console.print("[red]Missing mod.io user id:[/red] pass --id or set MODCHECK_USER_ID.", soft_wrap=True)
        raise typer.Exit(code=2)

    try:
        token = load_access_token(access_token)
        raw_list = load_mod_list(mod_list)
    except ResourceLoadError as exc:
        _console.print(f"[red]Error:[/red] {exc}", soft_wrap=True)
        raise typer.Exit(code=1) from exc

    pattern = compile_mod_url_pattern(settings.mod_url_host, settings.mod_url_game_path)
    references = extract_references(raw_list, pattern)
    logger.debug("mod list: %s", [r.url for r in references])

    result = asyncio.run(
        _run_check(
            settings=settings,
            references=references,
            user_id=effective_user_id,
            token=token,
        )
    )

    error_log_path = settings.errors_log_path
    if result.cancelled:
        _console.print(
            f"[yellow]check cancelled after {result.checked}/{len(references)} mods,[/yellow] "
            f"writing partial log to `{error_log_path}`",
            soft_wrap=True,
        )
    else:
        _console.print(f"check completed, writing log to `{error_log_path}`", soft_wrap=True)
    write_error_log(errors=result.errors, output_path=error_log_path)
    if json_out is not None:
        export_result_json(result=result, output_path=json_out)
        _console.print(f"[green]JSON report:[/green] {json_out}")

    _console.print(build_summary_table(result))
    if result.cancelled:
        raise typer.Exit(code=130)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
