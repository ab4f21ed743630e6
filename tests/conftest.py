"""Test configuration and fixtures for Catalog Admin."""

from tests.fixtures import *  # noqa: F401,F403
