"""Unit tests for configuration loading and the context override system."""

from pathlib import Path

import pytest

from catalog_admin.runtime.config.config_data import ConfigData, DatabaseConfig
from catalog_admin.runtime.config.config_template import (
    apply_environment_overrides,
    load_templated_yaml,
    substitute_env_vars,
)
from catalog_admin.runtime.context import get_config, get_context, with_context

CONFIG_YAML = """
config:
  app:
    environment: test
    name: ${CATALOG_TEST_NAME:-Default Shop}
  database:
    url: ${CATALOG_TEST_DB:-sqlite:///:memory:}
  catalog:
    page_size: 25
"""


class TestSubstitution:
    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("CATALOG_TEST_NAME", raising=False)

        assert substitute_env_vars("${CATALOG_TEST_NAME:-fallback}") == "fallback"

    def test_variable_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("CATALOG_TEST_NAME", "Shop")

        assert substitute_env_vars("name: ${CATALOG_TEST_NAME:-fallback}") == "name: Shop"

    def test_required_variable_missing(self, monkeypatch):
        monkeypatch.delenv("CATALOG_TEST_REQUIRED", raising=False)

        with pytest.raises(ValueError, match="CATALOG_TEST_REQUIRED"):
            substitute_env_vars("${CATALOG_TEST_REQUIRED}")

    def test_required_with_message(self, monkeypatch):
        monkeypatch.delenv("CATALOG_TEST_REQUIRED", raising=False)

        with pytest.raises(ValueError, match="set me"):
            substitute_env_vars("${CATALOG_TEST_REQUIRED:?set me}")

    def test_environment_prefixed_override(self, monkeypatch):
        monkeypatch.setenv("TEST_CATALOG_TEST_DB", "sqlite:///override.db")
        monkeypatch.setenv("CATALOG_TEST_DB", "sqlite:///base.db")

        apply_environment_overrides("test")

        assert substitute_env_vars("${CATALOG_TEST_DB:-x}") == "sqlite:///override.db"


class TestLoadTemplatedYaml:
    def test_loads_sections(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "test")
        monkeypatch.setenv("CATALOG_TEST_NAME", "Corner Shop")
        monkeypatch.delenv("CATALOG_TEST_DB", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML)

        config = load_templated_yaml(path)

        assert config.app.name == "Corner Shop"
        assert config.app.environment == "test"
        assert config.database.url == "sqlite:///:memory:"
        assert config.catalog.page_size == 25
        assert config.storage.product_images_dir == "uploads/product"
        assert config.messages.product_created == "Product saved successfully."

    def test_substituted_values_are_not_parsed_as_yaml(self, tmp_path: Path, monkeypatch):
        """Values with ': ' or '#' survive substitution intact."""
        monkeypatch.setenv("APP_ENVIRONMENT", "test")
        monkeypatch.setenv("CATALOG_TEST_SECRET", "s3cr#t: value")
        monkeypatch.setenv("CATALOG_TEST_PORT", "9000")
        path = tmp_path / "config.yaml"
        path.write_text(
            "config:\n"
            "  app:\n"
            "    environment: test\n"
            "    session_signing_secret: ${CATALOG_TEST_SECRET}\n"
            "    port: ${CATALOG_TEST_PORT:-8000}\n"
        )

        config = load_templated_yaml(path)

        assert config.app.session_signing_secret == "s3cr#t: value"
        assert config.app.port == 9000

    def test_invalid_values_rejected(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "test")
        path = tmp_path / "config.yaml"
        path.write_text("config:\n  catalog:\n    page_size: 0\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)

    def test_empty_file_rejected(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        with pytest.raises(ValueError):
            load_templated_yaml(path)


class TestDatabaseConfig:
    def test_sqlite_connection_string_unchanged(self):
        config = DatabaseConfig(url="sqlite:///./catalog.db", password_env_var="CATALOG_DB_PASSWORD")

        assert config.is_sqlite
        assert config.connection_string == "sqlite:///./catalog.db"

    def test_password_applied_from_environment(self, monkeypatch):
        monkeypatch.setenv("CATALOG_DB_PASSWORD", "s3cret")
        config = DatabaseConfig(
            url="postgresql://catalog@db:5432/catalog", password_env_var="CATALOG_DB_PASSWORD"
        )

        assert config.connection_string == "postgresql://catalog:s3cret@db:5432/catalog"

    def test_missing_password_variable(self, monkeypatch):
        monkeypatch.delenv("CATALOG_DB_PASSWORD", raising=False)
        config = DatabaseConfig(
            url="postgresql://catalog@db:5432/catalog", password_env_var="CATALOG_DB_PASSWORD"
        )

        with pytest.raises(ValueError):
            _ = config.connection_string


class TestContext:
    """Test the context override functionality."""

    def test_with_context_partial_override(self):
        original = get_config()
        override = ConfigData()
        override.catalog.page_size = 2

        with with_context(override):
            current = get_config()
            assert current.catalog.page_size == 2
            assert current.app.name == original.app.name

        assert get_config() is original

    def test_nested_overrides(self):
        original_not_found = get_config().messages.not_found
        outer = ConfigData()
        outer.catalog.page_size = 3
        inner = ConfigData()
        inner.messages.not_found = "Gone."

        with with_context(outer):
            with with_context(inner):
                assert get_config().catalog.page_size == 3
                assert get_config().messages.not_found == "Gone."
            assert get_config().messages.not_found == original_not_found
            assert get_config().catalog.page_size == 3

    def test_none_override_is_noop(self):
        before = get_context()

        with with_context(None):
            assert get_context() is before

    def test_rejects_non_config(self):
        with pytest.raises(ValueError):
            with with_context({"catalog": {"page_size": 1}}):
                pass
