"""Object storage CLI commands."""

import typer
from rich.console import Console
from rich.table import Table

from src.catalog.core.errors import CatalogError
from src.catalog.core.services import (
    DbSessionService,
    ProductCatalogService,
    StorageService,
)
from src.catalog.runtime.context import get_config

console = Console()

storage_app = typer.Typer(help="Inspect and prepare the product image bucket")


@storage_app.command("bootstrap")
def bootstrap() -> None:
    """Create the bucket if needed and make its objects publicly readable."""
    storage = StorageService(get_config().storage)
    try:
        storage.ensure_bucket_exists()
    except CatalogError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(code=1) from e

    if storage.set_public_read_policy():
        console.print(f"[green]✅ Bucket '{storage.bucket}' is ready and public[/green]")
    else:
        console.print(
            f"[yellow]Bucket '{storage.bucket}' exists but the public read policy "
            "could not be applied[/yellow]"
        )


@storage_app.command("orphans")
def orphans(
    delete: bool = typer.Option(
        False, "--delete", help="Delete the orphaned objects instead of only listing them"
    ),
) -> None:
    """Report objects under the product folder that no product references."""
    db_session_service = DbSessionService()
    session = db_session_service.get_session()
    storage = StorageService(get_config().storage)
    try:
        keys = ProductCatalogService(session, storage).find_orphaned_keys()
    except CatalogError as e:
        console.print(f"[red]❌ Failed to scan bucket: {e.message}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        session.close()
        db_session_service.dispose()

    if not keys:
        console.print("[green]No orphaned objects found[/green]")
        return

    table = Table(title=f"Orphaned objects in '{storage.bucket}'")
    table.add_column("Key", style="cyan")
    for key in keys:
        table.add_row(key)
    console.print(table)

    if not delete:
        console.print(f"\n[yellow]Found {len(keys)} orphaned objects[/yellow]")
        return

    failed = 0
    for key in keys:
        try:
            storage.delete_file(key)
        except CatalogError as e:
            failed += 1
            console.print(f"[red]❌ {key}: {e.message}[/red]")

    console.print(f"\n[green]Deleted {len(keys) - failed} orphaned objects[/green]")
    if failed:
        raise typer.Exit(code=1)
