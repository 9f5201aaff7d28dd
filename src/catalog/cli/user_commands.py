"""User management CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from src.catalog.core.errors import CatalogError
from src.catalog.core.security import PasswordHasher
from src.catalog.core.services import DbSessionService, UserManagementService
from src.catalog.runtime.context import get_config

console = Console()

# Create the users subcommand app
users_app = typer.Typer(help="Manage catalog user accounts")


@contextmanager
def user_service() -> Iterator[UserManagementService]:
    """Open a user management service over a fresh database session."""
    db_session_service = DbSessionService()
    try:
        with db_session_service.session_scope() as session:
            yield UserManagementService(session, PasswordHasher(get_config().security))
    finally:
        db_session_service.dispose()


@users_app.command("list")
def list_users() -> None:
    """List all registered users."""
    with user_service() as service:
        users = service.list()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Created", style="magenta")

    for user in users:
        table.add_row(
            str(user.id),
            user.name,
            user.email,
            user.created_at.isoformat() if user.created_at else "",
        )

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("add")
def add_user(
    name: str = typer.Argument(..., help="Display name for the new user"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Password"
    ),
) -> None:
    """Register a new user."""
    try:
        with user_service() as service:
            user = service.create(name, email, password)
    except CatalogError as e:
        console.print(f"[red]❌ Failed to create user: {e.message}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Created user '{user.email}' with id {user.id}[/green]")


@users_app.command("remove")
def remove_user(
    user_id: int = typer.Argument(..., help="ID of the user to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete a user account."""
    if not force and not Confirm.ask(f"Are you sure you want to delete user {user_id}?"):
        console.print("[yellow]Deletion cancelled[/yellow]")
        return

    try:
        with user_service() as service:
            service.remove(user_id)
    except CatalogError as e:
        console.print(f"[red]❌ Failed to delete user: {e.message}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Deleted user {user_id}[/green]")
