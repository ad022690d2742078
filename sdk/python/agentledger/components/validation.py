"""Argument checks shared by the ledger components.

Every value that ends up in an event payload must survive decoding, so
operations reject mistyped arguments before anything is staged.
"""

from typing import Any

from agentledger.exceptions import ValidationError


def require_str(field_name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string, got {type(value).__name__}")
    return value


def require_int(field_name: str, value: Any) -> int:
    # bool is an int subclass but decodes as a different wire type
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer, got {type(value).__name__}")
    return value
