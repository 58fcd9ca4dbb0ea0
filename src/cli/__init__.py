"""CLI (Typer + Rich): comandos `check` y `doctor`."""
