"""Shared pytest fixtures for catalog tests."""

from .app import *  # noqa: F401,F403
from .catalog import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
