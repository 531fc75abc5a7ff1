"""Security configuration and middleware."""

from flask import abort, current_app, request


def configure_security_headers(app):
    """Configure security headers."""

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        # Prevent MIME type sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # Prevent clickjacking
        response.headers['X-Frame-Options'] = 'DENY'

        # Control referrer information
        response.headers['Referrer-Policy'] = 'no-referrer'

        # JSON API: nothing here should ever be rendered or cached by a browser
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
        response.headers['Cache-Control'] = 'no-store'

        # HSTS for HTTPS (only add if using HTTPS)
        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response

    return app


def validate_input_length(app):
    """Middleware to validate request payload size."""
    @app.before_request
    def limit_request_size():
        # Limit JSON payload size to 1MB
        if request.content_length and request.content_length > 1024 * 1024:
            abort(413)  # Payload Too Large

    return app


def configure_password_policy():
    """Configure password complexity requirements."""
    return {
        'min_length': current_app.config.get('PASSWORD_MIN_LENGTH', 6),
        'require_uppercase': current_app.config.get('PASSWORD_REQUIRE_UPPERCASE', False),
        'require_digits': current_app.config.get('PASSWORD_REQUIRE_DIGITS', False),
    }


def is_password_strong(password):
    """Validate password against policy."""
    policy = configure_password_policy()

    if len(password) < policy['min_length']:
        return False, f"Password must be at least {policy['min_length']} characters long"

    if policy['require_uppercase'] and not any(c.isupper() for c in password):
        return False, "Password must contain at least one uppercase letter"

    if policy['require_digits'] and not any(c.isdigit() for c in password):
        return False, "Password must contain at least one digit"

    return True, "Password meets requirements"


# Rate limits for the account endpoints
def login_rate_limit():
    return "10 per minute"


def signup_rate_limit():
    return "5 per minute"


def otp_rate_limit():
    return "5 per minute"


def password_reset_rate_limit():
    return "3 per minute"


__all__ = [
    'configure_security_headers',
    'validate_input_length',
    'is_password_strong',
    'login_rate_limit',
    'signup_rate_limit',
    'otp_rate_limit',
    'password_reset_rate_limit',
]
