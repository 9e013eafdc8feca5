"""Input sanitizing helpers shared by checkers and route handlers."""
import re
from typing import Any

_EMAIL = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def sanitize_string(value: Any, max_length: int = 255) -> str:
    """Trim whitespace and cap length. Non-strings become the empty string."""
    if not isinstance(value, str):
        return ""
    return value.strip()[:max_length]


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL.fullmatch(value))
