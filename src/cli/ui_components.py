"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar líneas/tablas en `check` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from adapters.error_log import status_label
from core.domain.models import CheckError, CheckResult, error_url


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("modcheck", style="bold cyan")
    subtitle = Text("mod.io list validation • rate-limit aware", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_progress(console: Console) -> Progress:
    """Barra de progreso 'Checking n/total'.

    En terminales angostas se omite la descripción del mod actual.
    """

    columns = [
        TextColumn("[bold cyan]{task.description:>12}"),
        SpinnerColumn(style="blue"),
        BarColumn(bar_width=57),
        MofNCompleteColumn(),
    ]
    if console.size.width > 80:
        columns.append(TextColumn("{task.fields[current]}", style="dim"))
    return Progress(*columns, console=console, transient=True)


def format_error_text(error: CheckError) -> Text:
    return Text.assemble(
        (f"{'ERROR':>12}", "bold red"),
        " ",
        (f"{status_label(error):>3}", "bold yellow"),
        " ",
        error_url(error),
    )


def format_cooldown_text(seconds: float) -> Text:
    return Text.assemble(
        (f"{'INFO':>12}", "bold cyan"),
        " waiting ",
        (f"{seconds:g} seconds", "blue"),
        " to not trigger mod.io rate limit",
    )


def build_summary_table(result: CheckResult) -> Table:
    """Resumen de la corrida."""

    table = Table(title="Mod check summary")
    table.add_column("Checked", style="cyan", justify="right")
    table.add_column("Valid", style="green", justify="right")
    table.add_column("Errors", style="red", justify="right")
    table.add_column("Cooldowns", style="blue", justify="right")
    table.add_row(
        str(result.checked),
        str(result.valid),
        str(len(result.errors)),
        str(result.cooldowns),
    )
    return table
