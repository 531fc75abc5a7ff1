from .models import (  # noqa: F401
    Account,
    AccountRole,
    AuditLog,
    OtpPurpose,
    TimestampedBase,
    as_utc,
)

__all__ = [
    "Account",
    "AccountRole",
    "AuditLog",
    "OtpPurpose",
    "TimestampedBase",
    "as_utc",
]
