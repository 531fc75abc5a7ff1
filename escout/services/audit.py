"""Audit logging service for account security events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import current_app, has_request_context, request
from sqlalchemy.exc import SQLAlchemyError

from escout.extensions import db
from escout.models import AuditLog

if TYPE_CHECKING:
    from escout.models import Account


def _remote_addr() -> str | None:
    return request.remote_addr if has_request_context() else None


def log_security_event(
    account: Account | None,
    action: str,
    details: str | None = None,
    metadata: dict[str, Any] | None = None
) -> None:
    """
    Log a security-related event to the audit log.

    Args:
        account: Account the event concerns, if one was resolved
        action: Action performed (e.g., "login_success", "password_reset")
        details: Optional additional details
        metadata: Additional metadata to store
    """
    try:
        meta = dict(metadata or {})
        meta['ip_address'] = _remote_addr()
        if details:
            meta['details'] = details

        audit_entry = AuditLog(
            account_id=account.id if account is not None else None,
            action=action,
            meta=meta
        )

        db.session.add(audit_entry)
        db.session.commit()

    except SQLAlchemyError as e:
        # Don't fail the request if audit logging fails
        db.session.rollback()
        current_app.logger.error(f"Failed to log security event: {e}")


def log_login_attempt(
    account: Account | None,
    success: bool,
    email: str,
    reason: str | None = None
) -> None:
    """Log a login attempt (successful or failed)."""
    metadata: dict[str, Any] = {'email': email}
    if reason:
        metadata['reason'] = reason
    action = "login_success" if success else "login_failed"
    log_security_event(account, action, metadata=metadata)


__all__ = ["log_security_event", "log_login_attempt"]
