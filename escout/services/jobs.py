"""Background job functions for RQ worker."""


def send_otp_email_job(to_email, otp, purpose):
    """Background job to send a one-time passcode."""
    from escout import create_app

    app = create_app()

    with app.app_context():
        from escout.services.email import send_otp_email
        sent = send_otp_email(to_email=to_email, otp=otp, purpose=purpose)
        if not sent:
            app.logger.warning(f"OTP email job could not deliver to {to_email}")
        return sent
