"""Security package for escout."""

from .config import (  # noqa: F401
    configure_security_headers,
    is_password_strong,
    validate_input_length,
)

__all__ = [
    "configure_security_headers",
    "is_password_strong",
    "validate_input_length",
]
