"""Email service for sending one-time passcodes."""

from __future__ import annotations

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from flask import current_app

from escout.models import OtpPurpose

_SUBJECTS = {
    OtpPurpose.SIGNUP: "Verify your email",
    OtpPurpose.RESET_PASSWORD: "Reset your password",
}


def send_otp_email(to_email: str, otp: str, purpose: OtpPurpose | str = OtpPurpose.SIGNUP) -> bool:
    """
    Send a one-time passcode to ``to_email``.

    Args:
        to_email: Recipient address
        otp: The 6-digit code
        purpose: Which flow the code belongs to

    Returns:
        True if email sent successfully, False otherwise
    """
    try:
        purpose = OtpPurpose(purpose)
        ttl = current_app.config['OTP_TTL_MINUTES']
        subject = _SUBJECTS[purpose]

        if purpose is OtpPurpose.RESET_PASSWORD:
            intro = "We received a request to reset the password on your esports scouting account."
        else:
            intro = "Thanks for signing up. Use the code below to verify your email address."

        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
                <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                    <h2 style="color: #7c3aed;">{subject}</h2>
                    <p>{intro}</p>
                    <p style="font-size: 2em; letter-spacing: 0.3em; text-align: center;"><strong>{otp}</strong></p>
                    <p><strong>This code will expire in {ttl} minutes.</strong></p>
                    <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">
                    <p style="color: #666; font-size: 0.9em;">
                        If you didn't request this code, you can ignore this email.
                    </p>
                </div>
            </body>
        </html>
        """

        text_body = f"""
{subject}

{intro}

Your OTP code is: {otp}

It will expire in {ttl} minutes.

If you didn't request this code, you can ignore this email.
        """

        return _send_email(
            to_email=to_email,
            subject=subject,
            html_body=html_body,
            text_body=text_body
        )

    except Exception as e:
        current_app.logger.error(f"Failed to send OTP email: {e}")
        return False


def _send_email(to_email: str, subject: str, html_body: str, text_body: str) -> bool:
    """
    Send email over SMTP.

    With EMAIL_ENABLED off the message is logged instead of sent.
    """
    config = current_app.config

    if not config.get('EMAIL_ENABLED'):
        current_app.logger.info(f"""
        ========== EMAIL (Development Mode) ==========
        To: {to_email}
        Subject: {subject}

        {text_body}
        ==============================================
        """)
        return True

    smtp_host = config.get('SMTP_HOST')
    smtp_port = config.get('SMTP_PORT', 587)
    smtp_user = config.get('SMTP_USER')
    smtp_password = config.get('SMTP_PASSWORD')
    from_email = config.get('FROM_EMAIL') or smtp_user

    if not all([smtp_host, smtp_user, smtp_password]):
        current_app.logger.warning("Email credentials not configured")
        return False

    try:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = from_email
        msg['To'] = to_email
        msg.attach(MIMEText(text_body, 'plain'))
        msg.attach(MIMEText(html_body, 'html'))

        with smtplib.SMTP(smtp_host, smtp_port) as server:
            server.starttls()
            server.login(smtp_user, smtp_password)
            server.send_message(msg)

        current_app.logger.info(f"Email sent successfully to {to_email}")
        return True

    except (smtplib.SMTPException, OSError) as e:
        current_app.logger.error(f"Failed to send email: {e}")
        return False


__all__ = ["send_otp_email"]
