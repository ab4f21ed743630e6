"""One-shot flash messages kept in the user's session."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from pydantic import BaseModel, Field

FLASH_SESSION_KEY = "_flash"


class FlashData(BaseModel):
    """What the previous request left for this page to show."""

    successMessage: str | None = None
    errorMessage: str | None = None
    errors: dict[str, list[str]] = Field(default_factory=dict)
    old: dict[str, Any] = Field(default_factory=dict)


class FlashBag:
    """Flash storage on top of a session mapping.

    Values written with :meth:`flash` survive until the next :meth:`consume`,
    which returns them and clears them in the same step.
    """

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def flash(self, **values: Any) -> None:
        pending = dict(self._session.get(FLASH_SESSION_KEY) or {})
        pending.update({key: value for key, value in values.items() if value is not None})
        self._session[FLASH_SESSION_KEY] = pending

    def peek(self) -> FlashData:
        return FlashData.model_validate(self._session.get(FLASH_SESSION_KEY) or {})

    def consume(self) -> FlashData:
        return FlashData.model_validate(self._session.pop(FLASH_SESSION_KEY, None) or {})
