from .auth import (  # noqa: F401
    EmailOnlyForm,
    LoginForm,
    LogoutForm,
    RefreshTokenForm,
    ResetPasswordForm,
    SignupForm,
    VerifyOtpForm,
)
