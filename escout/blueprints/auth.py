"""Account lifecycle API blueprint."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from escout.auth import current_account, token_required
from escout.extensions import limiter
from escout.forms import (
    EmailOnlyForm,
    LoginForm,
    LogoutForm,
    RefreshTokenForm,
    ResetPasswordForm,
    SignupForm,
    VerifyOtpForm,
)
from escout.security.config import (
    login_rate_limit,
    otp_rate_limit,
    password_reset_rate_limit,
    signup_rate_limit,
)
from escout.services import accounts
from escout.services.exceptions import ValidationFailed

auth_bp = Blueprint("auth", __name__)


def _validated(form_class):
    # Forms only accept key/value bodies; a bare JSON string, number or list is malformed
    if request.is_json and not isinstance(request.get_json(silent=True), dict):
        raise ValidationFailed({'body': ['Request body must be a JSON object']})
    form = form_class()
    if not form.validate_on_submit():
        raise ValidationFailed(form.errors)
    return form


def _ok(message: str, status_code: int = 200, **extra):
    payload = {'success': True, 'message': message}
    payload.update(extra)
    return jsonify(payload), status_code


@auth_bp.route("/signup", methods=["POST"])
@limiter.limit(signup_rate_limit)
def signup():
    form = _validated(SignupForm)
    accounts.signup(form.email.data, form.password.data, form.role.data)
    return _ok("OTP sent to email. Please verify to complete signup.", 201)


@auth_bp.route("/verify-otp", methods=["POST"])
@limiter.limit(otp_rate_limit)
def verify_otp():
    form = _validated(VerifyOtpForm)
    accounts.verify_signup(form.email.data, form.otp.data)
    return _ok("Email verified successfully. You can now login.")


@auth_bp.route("/resend-otp", methods=["POST"])
@limiter.limit(otp_rate_limit)
def resend_otp():
    form = _validated(EmailOnlyForm)
    accounts.resend_otp(form.email.data)
    return _ok("A new OTP has been sent to your email.")


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(login_rate_limit)
def login():
    form = _validated(LoginForm)
    session = accounts.login(form.email.data, form.password.data)
    return _ok("Login successful", **session)


@auth_bp.route("/refresh-token", methods=["POST"])
def refresh_token():
    form = _validated(RefreshTokenForm)
    access_token = accounts.refresh_access_token(form.refreshToken.data)
    return _ok("Token refreshed", accessToken=access_token)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    form = _validated(LogoutForm)
    accounts.logout(form.userId.data)
    return _ok("Logged out successfully")


@auth_bp.route("/forgot-password", methods=["POST"])
@limiter.limit(password_reset_rate_limit)
def forgot_password():
    form = _validated(EmailOnlyForm)
    accounts.forgot_password(form.email.data)
    return _ok("OTP sent to email")


@auth_bp.route("/reset-password", methods=["POST"])
@limiter.limit(otp_rate_limit)
def reset_password():
    form = _validated(ResetPasswordForm)
    accounts.reset_password(form.email.data, form.otp.data, form.newPassword.data)
    return _ok("Password reset successfully")


@auth_bp.route("/me", methods=["GET"])
@token_required
def me():
    return jsonify({'success': True, 'user': current_account().to_dict()})


__all__ = ["auth_bp"]
