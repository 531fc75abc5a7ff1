"""Errors raised by the account services and mapped to HTTP responses."""

from __future__ import annotations


class AuthError(Exception):
    """Base class for account lifecycle failures."""

    status_code = 400
    message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationFailed(AuthError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: dict | None = None, message: str | None = None):
        super().__init__(message)
        self.errors = errors or {}


class DuplicateEmail(AuthError):
    status_code = 400
    message = "Email already registered"


class AccountNotFound(AuthError):
    status_code = 404
    message = "Account not found"


class OtpExpired(AuthError):
    status_code = 400
    message = "OTP has expired"


class OtpMismatch(AuthError):
    status_code = 400
    message = "Invalid OTP"


class AlreadyVerified(AuthError):
    status_code = 400
    message = "Account is already verified"


class AccountUnverified(AuthError):
    status_code = 403
    message = "Please verify your email first"


class InvalidCredentials(AuthError):
    status_code = 401
    message = "Invalid email or password"


class InvalidToken(AuthError):
    status_code = 401
    message = "Invalid or expired token"


class Forbidden(AuthError):
    status_code = 403
    message = "Access denied"


__all__ = [
    "AuthError",
    "ValidationFailed",
    "DuplicateEmail",
    "AccountNotFound",
    "OtpExpired",
    "OtpMismatch",
    "AlreadyVerified",
    "AccountUnverified",
    "InvalidCredentials",
    "InvalidToken",
    "Forbidden",
]
