"""Outgoing account emails over SMTP.

With ``SMTP_ENABLED`` off (the default) nothing is sent; the link is
logged instead so local development can follow it.
"""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from mathquest_config.settings import Settings

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify Your MathQuest Account"

VERIFICATION_TEXT = """Welcome to MathQuest!

To complete your registration, verify your email address by visiting this link:
{verification_link}

If you didn't create a MathQuest account, you can safely ignore this email.

-- The MathQuest Team
"""

VERIFICATION_HTML = """
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2 style="color: #667eea;">Verify Your Email Address</h2>
    <p>Thank you for registering with MathQuest! Click the button below to verify your email address.</p>
    <p style="margin: 30px 0; text-align: center;">
        <a href="{verification_link}" style="background: #667eea; color: #ffffff; padding: 14px 30px; text-decoration: none; border-radius: 5px; font-weight: bold;">Verify Email Address</a>
    </p>
    <p style="color: #666; font-size: 14px;">Or copy and paste this link into your browser:</p>
    <p style="word-break: break-all; font-size: 12px;">{verification_link}</p>
    <p style="color: #666; font-size: 13px;">If you didn't create a MathQuest account, you can safely ignore this email.</p>
</body>
</html>
"""

PASSWORD_RESET_SUBJECT = "Password Reset Request - MathQuest"

PASSWORD_RESET_TEXT = """Hello,

You requested a password reset for your MathQuest account.

Click the link below to reset your password (valid for {valid_hours} hour(s)):
{reset_link}

If you didn't request this, you can safely ignore this email.

-- The MathQuest Team
"""

PASSWORD_RESET_HTML = """
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2 style="color: #667eea;">Password Reset Request</h2>
    <p>You requested a password reset for your MathQuest account.</p>
    <p>This link is valid for {valid_hours} hour(s).</p>
    <p style="margin: 30px 0; text-align: center;">
        <a href="{reset_link}" style="background: #667eea; color: #ffffff; padding: 14px 30px; text-decoration: none; border-radius: 5px; font-weight: bold;">Reset Password</a>
    </p>
    <p style="word-break: break-all; font-size: 12px;">{reset_link}</p>
    <p style="color: #666; font-size: 13px;">If you didn't request this, you can safely ignore this email.</p>
</body>
</html>
"""


class EmailService:
    def __init__(self, settings: Settings):
        self._settings = settings

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        settings = self._settings
        msg["From"] = f"{settings.smtp_from_name} <{settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))
        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            logger.error("SMTP host not configured, email to %s not sent", to_email)
            return

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=ssl.create_default_context(),
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                ) as server:
                    if self._settings.smtp_starttls:
                        server.starttls(context=ssl.create_default_context())
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise

    def send_verification_email(self, to_email: str, verification_link: str) -> None:
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, skipping verification email to %s (link: %s)",
                to_email,
                verification_link,
            )
            return

        message = self._create_message(
            to_email=to_email,
            subject=VERIFICATION_SUBJECT,
            text_body=VERIFICATION_TEXT.format(verification_link=verification_link),
            html_body=VERIFICATION_HTML.format(verification_link=verification_link),
        )
        self._send_email(to_email, message)

    def send_password_reset_email(self, to_email: str, reset_link: str) -> None:
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, skipping password reset email to %s (link: %s)",
                to_email,
                reset_link,
            )
            return

        valid_hours = self._settings.password_reset_token_expire_hours
        message = self._create_message(
            to_email=to_email,
            subject=PASSWORD_RESET_SUBJECT,
            text_body=PASSWORD_RESET_TEXT.format(
                reset_link=reset_link,
                valid_hours=valid_hours,
            ),
            html_body=PASSWORD_RESET_HTML.format(
                reset_link=reset_link,
                valid_hours=valid_hours,
            ),
        )
        self._send_email(to_email, message)
