"""Composable field validator.

A validator is an ordered mapping of ``field -> [Rule, ...]``. Rules of a
field run in order and stop at the first failure, so each field reports at
most one message; other fields are still checked. Errors come back as
``{field: [message, ...]}``.

Rule semantics follow the usual form-validation conventions:

* string input is trimmed and empty strings become ``None``;
* ``required`` fails on a missing or ``None`` value;
* ``nullable`` ends the field's checks successfully when the value is ``None``;
* every other rule is skipped when the field was not submitted at all.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from catalog_admin.core.exceptions import ValidationError

# Range of the INTEGER columns ids and counts are stored in.
MAX_INTEGER = 2**31 - 1
_INTEGER_CHARS = set("0123456789")
_STRICT_TRUE = {True, 1, "1", "true"}
_STRICT_FALSE = {False, 0, "0", "false"}
_PERMISSIVE_TRUE = {"1", "true", "on", "yes"}
_http_url = TypeAdapter(HttpUrl)


@dataclass(frozen=True)
class Rule:
    """A named predicate with the message reported when it fails.

    ``message`` may use ``{attribute}`` plus any key of ``params``.
    """

    name: str
    check: Callable[[Any], bool]
    message: str
    implicit: bool = False
    params: tuple[tuple[str, Any], ...] = ()

    def format_message(self, field: str) -> str:
        return self.message.format(attribute=field.replace("_", " "), **dict(self.params))


def _always(_value: Any) -> bool:
    return True


def normalize_input(data: Mapping[str, Any]) -> dict[str, Any]:
    """Trim string values and convert blank strings to ``None``."""
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip()
            if value == "":
                value = None
        normalized[key] = value
    return normalized


def to_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def is_integer_like(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if not isinstance(value, str):
        return False
    digits = value[1:] if value[:1] in "+-" else value
    return bool(digits) and set(digits) <= _INTEGER_CHARS


def parse_bool_strict(value: Any) -> bool | None:
    """Map the accepted boolean tokens to ``True``/``False``; ``None`` for anything else."""
    if not isinstance(value, (str, int)):
        return None
    token = value.lower() if isinstance(value, str) else value
    if token in _STRICT_TRUE:
        return True
    if token in _STRICT_FALSE:
        return False
    return None


def parse_bool_permissive(value: Any) -> bool:
    """Truthy for ``1/true/on/yes`` in any case, falsy for everything else."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _PERMISSIVE_TRUE


# --- Rule builders ---


def required() -> Rule:
    return Rule(
        "required",
        lambda value: value is not None,
        "The {attribute} field is required.",
        implicit=True,
    )


def nullable() -> Rule:
    return Rule("nullable", _always, "")


def string() -> Rule:
    return Rule("string", lambda value: isinstance(value, str), "The {attribute} field must be a string.")


def max_length(limit: int) -> Rule:
    return Rule(
        "max",
        lambda value: isinstance(value, str) and len(value) <= limit,
        "The {attribute} field must not be greater than {max} characters.",
        params=(("max", limit),),
    )


def numeric() -> Rule:
    return Rule("numeric", lambda value: to_decimal(value) is not None, "The {attribute} field must be a number.")


def integer() -> Rule:
    return Rule("integer", is_integer_like, "The {attribute} field must be an integer.")


def min_value(minimum: int | Decimal) -> Rule:
    def check(value: Any) -> bool:
        number = to_decimal(value)
        return number is not None and number >= Decimal(minimum)

    return Rule("min", check, "The {attribute} field must be at least {min}.", params=(("min", minimum),))


def max_value(maximum: int | Decimal) -> Rule:
    def check(value: Any) -> bool:
        number = to_decimal(value)
        return number is not None and number <= Decimal(maximum)

    return Rule(
        "max_value",
        check,
        "The {attribute} field must not be greater than {max}.",
        params=(("max", maximum),),
    )


def boolean() -> Rule:
    return Rule(
        "boolean",
        lambda value: parse_bool_strict(value) is not None,
        "The {attribute} field must be true or false.",
    )


def url() -> Rule:
    def check(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            _http_url.validate_python(value)
        except PydanticValidationError:
            return False
        return True

    return Rule("url", check, "The {attribute} field must be a valid URL.")


def unique(is_taken: Callable[[Any], bool]) -> Rule:
    """Fails when ``is_taken(value)`` reports the value already in use."""
    return Rule("unique", lambda value: not is_taken(value), "The {attribute} has already been taken.")


def exists(lookup: Callable[[int], bool]) -> Rule:
    """Fails unless ``value`` is an integer id that ``lookup`` confirms exists."""

    def check(value: Any) -> bool:
        if not is_integer_like(value) or not 0 < int(value) <= MAX_INTEGER:
            return False
        return lookup(int(value))

    return Rule("exists", check, "The selected {attribute} is invalid.")


class Validator:
    """Evaluates an ordered set of field rules against submitted input."""

    def __init__(self, rules: Mapping[str, Sequence[Rule]]) -> None:
        self._rules = {field: list(field_rules) for field, field_rules in rules.items()}

    def _check_field(self, field: str, data: Mapping[str, Any]) -> str | None:
        present = field in data
        value = data.get(field)
        for rule in self._rules[field]:
            if rule.name == "nullable":
                if value is None:
                    return None
                continue
            if not present and not rule.implicit:
                return None
            if not rule.check(value):
                return rule.format_message(field)
        return None

    def errors(self, data: Mapping[str, Any]) -> dict[str, list[str]]:
        """Return ``{field: [message]}`` for every failing field, in rule order."""
        normalized = normalize_input(data)
        errors: dict[str, list[str]] = {}
        for field in self._rules:
            message = self._check_field(field, normalized)
            if message is not None:
                errors.setdefault(field, []).append(message)
        return errors

    def validate(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Return the normalized values of the ruled fields that were submitted.

        Raises:
            ValidationError: when any field fails.
        """
        errors = self.errors(data)
        if errors:
            raise ValidationError(errors)
        normalized = normalize_input(data)
        return {field: normalized[field] for field in self._rules if field in normalized}
