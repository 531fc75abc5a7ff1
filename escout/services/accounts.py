"""Account lifecycle: signup, verification, sessions and password reset."""

from __future__ import annotations

from datetime import datetime, timezone

from flask import current_app
from sqlalchemy.exc import IntegrityError

from escout.extensions import db
from escout.models import Account, AccountRole, OtpPurpose
from escout.services.audit import log_login_attempt, log_security_event
from escout.services.exceptions import (
    AccountNotFound,
    AccountUnverified,
    AlreadyVerified,
    DuplicateEmail,
    InvalidCredentials,
    InvalidToken,
)
from escout.services.otp import check_otp, find_account, issue_otp, normalize_email
from escout.services.tokens import (
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
)


def signup(email: str, password: str, role: AccountRole | str) -> Account:
    """Create an unverified account and send it a signup code."""
    email = normalize_email(email)
    if find_account(email) is not None:
        raise DuplicateEmail()

    account = Account(email=email, role=AccountRole(role), is_verified=False)
    account.set_password(password)
    db.session.add(account)
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent signup claimed the email between the check and the insert
        db.session.rollback()
        raise DuplicateEmail()

    current_app.logger.info(f"Account created for {email} ({account.role.value})")
    log_security_event(account, "signup")

    issue_otp(account, OtpPurpose.SIGNUP)
    return account


def verify_signup(email: str, otp: str) -> Account:
    account = check_otp(email, otp, OtpPurpose.SIGNUP)
    account.is_verified = True
    account.clear_otp()
    db.session.commit()

    log_security_event(account, "email_verified")
    return account


def resend_otp(email: str) -> Account:
    account = find_account(email)
    if account is None:
        raise AccountNotFound()
    if account.is_verified:
        raise AlreadyVerified()

    issue_otp(account, OtpPurpose.SIGNUP)
    return account


def login(email: str, password: str) -> dict:
    """
    Authenticate and open a session.

    Verification is checked before the password, so an unverified account
    is refused whatever password was supplied.

    Returns:
        dict with accessToken, refreshToken, role and userId
    """
    email = normalize_email(email)
    account = find_account(email)
    if account is None:
        raise AccountNotFound()

    if not account.is_verified:
        log_login_attempt(account, False, email, reason="unverified")
        raise AccountUnverified()

    if not account.check_password(password):
        log_login_attempt(account, False, email, reason="invalid_password")
        raise InvalidCredentials()

    access_token = create_access_token(account)
    refresh_token = create_refresh_token(account)

    account.remember_refresh_token(refresh_token)
    account.last_login_at = datetime.now(timezone.utc)
    db.session.commit()

    log_login_attempt(account, True, email)

    return {
        'accessToken': access_token,
        'refreshToken': refresh_token,
        'role': account.role.value,
        'userId': account.id,
    }


def refresh_access_token(refresh_token: str) -> str:
    """Exchange a stored refresh token for a new access token.

    The refresh token itself is not rotated.
    """
    claims = decode_token(refresh_token, REFRESH)

    account = db.session.get(Account, claims['sub'])
    if account is None or not account.matches_refresh_token(refresh_token):
        raise InvalidToken("Invalid refresh token")

    return create_access_token(account)


def logout(user_id: str) -> None:
    """Forget the stored refresh token. Unknown ids are ignored."""
    account = db.session.get(Account, user_id)
    if account is None or account.refresh_token_hash is None:
        return

    account.forget_refresh_token()
    db.session.commit()
    log_security_event(account, "logout")


def forgot_password(email: str) -> Account:
    account = find_account(email)
    if account is None:
        raise AccountNotFound()

    issue_otp(account, OtpPurpose.RESET_PASSWORD)
    log_security_event(account, "password_reset_requested")
    return account


def reset_password(email: str, otp: str, new_password: str) -> Account:
    """Overwrite the password once the reset code checks out.

    Verification status is left alone; open sessions are ended.
    """
    account = check_otp(email, otp, OtpPurpose.RESET_PASSWORD)
    account.set_password(new_password)
    account.clear_otp()
    account.forget_refresh_token()
    db.session.commit()

    log_security_event(account, "password_reset")
    return account


__all__ = [
    "signup",
    "verify_signup",
    "resend_otp",
    "login",
    "refresh_access_token",
    "logout",
    "forgot_password",
    "reset_password",
]
