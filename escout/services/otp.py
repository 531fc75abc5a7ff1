"""One-time passcode issuance and verification."""

from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timedelta, timezone

from flask import current_app
from redis.exceptions import RedisError

from escout.extensions import db
from escout.models import Account, OtpPurpose
from escout.services.email import send_otp_email
from escout.services.exceptions import AccountNotFound, OtpExpired, OtpMismatch

OTP_LENGTH = 6


def generate_otp() -> str:
    """Return a uniformly random 6-digit decimal string."""
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


def otp_expiry(now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(minutes=current_app.config['OTP_TTL_MINUTES'])


def find_account(email: str) -> Account | None:
    return Account.query.filter_by(email=normalize_email(email)).first()


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


def dispatch_otp(to_email: str, otp: str, purpose: OtpPurpose) -> bool:
    """Hand the code to the email collaborator. Failures are logged, not retried."""
    if current_app.config.get('EMAIL_QUEUE_ENABLED'):
        from escout.services.queue import QueueService
        try:
            QueueService(current_app.config['REDIS_URL']).enqueue_otp_email(
                to_email, otp, purpose.value
            )
            return True
        except (RedisError, ValueError) as e:
            current_app.logger.error(f"Failed to queue OTP email for {to_email}: {e}")
            return False

    sent = send_otp_email(to_email, otp, purpose)
    if not sent:
        current_app.logger.warning(f"OTP email to {to_email} was not delivered")
    return sent


def issue_otp(account: Account, purpose: OtpPurpose) -> bool:
    """
    Generate a fresh code for ``account``, persist it and email it.

    Concurrent issuances for one account are last-write-wins.

    Returns:
        True if the email was dispatched
    """
    code = generate_otp()
    account.set_otp(code, otp_expiry(), purpose)
    db.session.commit()
    return dispatch_otp(account.email, code, purpose)


def check_otp(email: str, otp: str, purpose: OtpPurpose) -> Account:
    """
    Verification gate shared by signup confirmation and password reset.

    The caller performs the terminal action and clears the code.

    Raises:
        AccountNotFound: no account for ``email``
        OtpMismatch: no code pending for ``purpose`` or the code differs
        OtpExpired: the pending code is past its expiry
    """
    account = find_account(email)
    if account is None:
        raise AccountNotFound()

    if not account.otp or account.otp_purpose != purpose:
        raise OtpMismatch()

    if account.is_otp_expired():
        raise OtpExpired()

    if not hmac.compare_digest(str(otp or '').encode('utf-8'), account.otp.encode('utf-8')):
        raise OtpMismatch()

    return account


def purge_expired_otps(now: datetime | None = None) -> int:
    """Clear codes whose expiry has passed. Returns the number of accounts touched."""
    now = now or datetime.now(timezone.utc)
    pending = Account.query.filter(Account.otp.isnot(None)).all()
    purged = 0
    for account in pending:
        if account.is_otp_expired(now):
            account.clear_otp()
            purged += 1
    db.session.commit()
    return purged


__all__ = [
    "generate_otp",
    "otp_expiry",
    "find_account",
    "normalize_email",
    "dispatch_otp",
    "issue_otp",
    "check_otp",
    "purge_expired_otps",
]
