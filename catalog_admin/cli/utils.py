"""Shared helpers for CLI commands."""

from rich.console import Console

from catalog_admin.core.services import DbSessionService

console = Console()


def get_db_service() -> DbSessionService:
    """Database service for the active configuration."""
    return DbSessionService()
