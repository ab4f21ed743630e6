"""Outcomes returned by controller operations.

Controllers never build HTTP responses themselves. Mutating operations return
an :class:`ActionResult` describing where to redirect and what to flash;
read operations return a :class:`ViewResult` naming the template to render.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Outcome(str, Enum):
    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"


class ActionResult(BaseModel):
    """Redirect target plus the transient state to flash for the next page.

    ``redirect_route`` is a route name; ``None`` means "back to the previous page".
    """

    outcome: Outcome
    redirect_route: str | None = None
    message: str | None = None
    errors: dict[str, list[str]] = Field(default_factory=dict)
    old_input: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @classmethod
    def success(cls, route: str, message: str) -> ActionResult:
        return cls(outcome=Outcome.SUCCESS, redirect_route=route, message=message)

    @classmethod
    def invalid(
        cls,
        errors: dict[str, list[str]],
        message: str,
        old_input: dict[str, Any] | None = None,
    ) -> ActionResult:
        return cls(
            outcome=Outcome.VALIDATION_ERROR,
            redirect_route=None,
            message=message,
            errors=errors,
            old_input=old_input,
        )

    @classmethod
    def not_found(cls, message: str) -> ActionResult:
        return cls(outcome=Outcome.NOT_FOUND, message=message)

    def flash_payload(self) -> dict[str, Any]:
        """Session flash entries for this result."""
        if self.outcome is Outcome.SUCCESS:
            return {"successMessage": self.message}
        payload: dict[str, Any] = {"errorMessage": self.message}
        if self.errors:
            payload["errors"] = self.errors
        if self.old_input is not None:
            payload["old"] = self.old_input
        return payload


class ViewResult(BaseModel):
    """Template name and the context it renders with."""

    template: str
    context: dict[str, Any] = Field(default_factory=dict)
