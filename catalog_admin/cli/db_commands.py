"""Database CLI commands."""

import typer
from rich.panel import Panel
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from catalog_admin.entities.catalog.category import CategoryRepository
from catalog_admin.runtime.init_db import init_db, seed_categories

from .utils import console, get_db_service

db_app = typer.Typer(help="🗄️  Database commands")


@db_app.command(name="init")
def init(
    seed: bool = typer.Option(True, "--seed/--no-seed", help="Seed default categories"),
) -> None:
    """Create all tables and, unless disabled, seed the default categories."""
    console.print(Panel.fit("[bold green]Initializing database[/bold green]", border_style="green"))
    db_service = get_db_service()
    try:
        init_db(db_service, seed=seed)
    except SQLAlchemyError as e:
        console.print(f"[red]❌ Database initialization failed: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        db_service.dispose()
    console.print("[green]✅ Database ready[/green]")


@db_app.command(name="seed-categories")
def seed() -> None:
    """Insert the default categories when none exist yet."""
    db_service = get_db_service()
    try:
        db_service.create_all()
        added = seed_categories(db_service)
    except SQLAlchemyError as e:
        console.print(f"[red]❌ Seeding failed: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        db_service.dispose()

    if added:
        console.print(f"[green]✅ Added {added} categories[/green]")
    else:
        console.print("[yellow]Categories already present; nothing to do[/yellow]")


@db_app.command(name="categories")
def list_categories() -> None:
    """List the categories products can be assigned to."""
    db_service = get_db_service()
    try:
        with db_service.session_scope() as session:
            categories = CategoryRepository(session).list_all()
    except SQLAlchemyError as e:
        console.print(f"[red]❌ Failed to list categories: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        db_service.dispose()

    if not categories:
        console.print("[yellow]No categories found. Run 'catalog-admin db seed-categories'.[/yellow]")
        return

    table = Table(title="Categories")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Slug", style="blue")
    for category in categories:
        table.add_row(str(category.id), category.name, category.slug or "")
    console.print(table)
