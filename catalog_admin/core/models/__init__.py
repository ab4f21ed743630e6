"""Core result and pagination models."""

from .pagination import Page, normalize_page
from .result import ActionResult, Outcome, ViewResult

__all__ = ["ActionResult", "Outcome", "Page", "ViewResult", "normalize_page"]
