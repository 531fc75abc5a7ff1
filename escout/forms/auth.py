"""Request forms for the account endpoints.

Flask-WTF reads JSON bodies on POST, so these validate the mobile client's
payloads the same way HTML forms would be validated. Field names follow the
JSON keys the client sends.
"""

from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import EmailField, PasswordField, SelectField, StringField
from wtforms.validators import DataRequired, Email, Length, Regexp, ValidationError

from escout.models import AccountRole
from escout.security.config import is_password_strong


def _clean(value):
    if value is None:
        return value
    return str(value).strip()


def _as_text(value):
    return value if value is None or isinstance(value, str) else str(value)


def _lower(value):
    return value.lower() if isinstance(value, str) else value


def strong_password(form, field):
    if not field.data:
        return
    ok, message = is_password_strong(field.data)
    if not ok:
        raise ValidationError(message)


otp_validators = [
    DataRequired(),
    Regexp(r'^\d{6}$', message="OTP must be a 6-digit code"),
]


class ApiForm(FlaskForm):
    class Meta:
        csrf = False


class SignupForm(ApiForm):
    email = EmailField("Email", validators=[DataRequired(), Email(), Length(max=255)], filters=[_clean, _lower])
    password = PasswordField("Password", validators=[DataRequired(), strong_password], filters=[_as_text])
    role = SelectField(
        "Role",
        choices=[(r.value, r.value.title()) for r in AccountRole],
        validators=[DataRequired()],
        filters=[_clean, _lower],
    )


class VerifyOtpForm(ApiForm):
    email = EmailField("Email", validators=[DataRequired(), Email()], filters=[_clean, _lower])
    otp = StringField("OTP", validators=otp_validators, filters=[_clean])


class EmailOnlyForm(ApiForm):
    """Resend OTP and forgot password both take just an email."""

    email = EmailField("Email", validators=[DataRequired(), Email()], filters=[_clean, _lower])


class LoginForm(ApiForm):
    email = EmailField("Email", validators=[DataRequired(), Email()], filters=[_clean, _lower])
    password = PasswordField("Password", validators=[DataRequired()], filters=[_as_text])


class RefreshTokenForm(ApiForm):
    refreshToken = StringField("Refresh token", validators=[DataRequired()], filters=[_clean])


class LogoutForm(ApiForm):
    userId = StringField("User id", validators=[DataRequired(), Length(max=36)], filters=[_clean])


class ResetPasswordForm(ApiForm):
    email = EmailField("Email", validators=[DataRequired(), Email()], filters=[_clean, _lower])
    otp = StringField("OTP", validators=otp_validators, filters=[_clean])
    newPassword = PasswordField("New password", validators=[DataRequired(), strong_password], filters=[_as_text])


__all__ = [
    "SignupForm",
    "VerifyOtpForm",
    "EmailOnlyForm",
    "LoginForm",
    "RefreshTokenForm",
    "LogoutForm",
    "ResetPasswordForm",
]
