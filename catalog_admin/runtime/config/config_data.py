"""Pydantic models for parsing the config.yaml configuration file.

These models mirror the structure of config.yaml and handle validation and
type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./catalog.db", description="Database connection URL"
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def connection_string(self) -> str:
        """Database URL with the password from ``password_env_var`` applied."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        if self.is_sqlite or not self.password_env_var:
            return self.url

        import os

        password = os.getenv(self.password_env_var)
        if not password:
            raise ValueError(f"Environment variable {self.password_env_var} not set")
        if base_url.password:
            logger.warning(
                "Database URL already contains a password; overriding it with {}",
                self.password_env_var,
            )
        return base_url.set(password=password).render_as_string(hide_password=False)


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    name: str = Field(default="Catalog Admin", description="Dashboard title")
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    session_max_age: int = Field(
        default=3600, description="Session cookie maximum age in seconds"
    )
    session_signing_secret: str = Field(
        default="dev-session-secret", description="Secret for signing session cookies"
    )
    session_cookie: str = Field(default="catalog_session")


class StorageConfig(BaseModel):
    """Blob storage configuration for uploaded images."""

    root: str = Field(default="storage/public", description="Directory for stored files")
    public_url: str = Field(
        default="/storage", description="URL prefix the storage root is served under"
    )
    product_images_dir: str = Field(
        default="uploads/product", description="Area for product image uploads"
    )


class CatalogConfig(BaseModel):
    """Catalog listing behaviour."""

    page_size: int = Field(default=10, ge=1, description="Products per list page")


class MessagesConfig(BaseModel):
    """User-facing flash messages."""

    validation_failed: str = Field(
        default="Validation error, please check your input."
    )
    product_created: str = Field(default="Product saved successfully.")
    product_updated: str = Field(default="Product updated successfully.")
    product_deleted: str = Field(default="Product deleted successfully.")
    not_found: str = Field(default="Product not found.")


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Blob storage configuration"
    )
    catalog: CatalogConfig = Field(
        default_factory=CatalogConfig, description="Catalog listing configuration"
    )
    messages: MessagesConfig = Field(
        default_factory=MessagesConfig, description="Flash message texts"
    )
