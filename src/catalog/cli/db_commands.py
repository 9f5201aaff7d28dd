"""Database CLI commands."""

import typer
from rich.console import Console

from src.catalog.runtime.init_db import init_db

console = Console()


def init_db_command() -> None:
    """Create the users and products tables if they do not exist."""
    try:
        init_db()
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print("[green]✅ Database tables are ready[/green]")
