"""Form validation."""

from .product_rules import create_product_validator, update_product_validator
from .validator import Rule, Validator, normalize_input, parse_bool_permissive, parse_bool_strict

__all__ = [
    "Rule",
    "Validator",
    "create_product_validator",
    "normalize_input",
    "parse_bool_permissive",
    "parse_bool_strict",
    "update_product_validator",
]
