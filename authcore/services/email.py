import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from urllib.parse import urlencode

import aiosmtplib

from authcore.core.config import SmtpConfig
from authcore.errors import NotificationError

logger = logging.getLogger(__name__)


def build_reset_link(frontend_url: str, reset_token: str) -> str:
    return f"{frontend_url.rstrip('/')}/reset-password?{urlencode({'token': reset_token})}"


class EmailNotifier:
    """Sends password reset links over SMTP."""

    def __init__(self, config: SmtpConfig, frontend_url: str, link_ttl_minutes: int):
        self.config = config
        self.frontend_url = frontend_url
        self.link_ttl_minutes = link_ttl_minutes

    def build_password_reset_message(self, email: str, reset_token: str) -> MIMEMultipart:
        reset_link = build_reset_link(self.frontend_url, reset_token)

        message = MIMEMultipart("alternative")
        message["Subject"] = "Password Reset Request"
        message["From"] = self.config.from_email
        message["To"] = email

        text = f"""
You requested a password reset for your account.

Please click the following link to reset your password:
{reset_link}

This link will expire in {self.link_ttl_minutes} minutes.

If you did not request this, please ignore this email.
        """
        html = f"""
<html>
  <body>
    <p>You requested a password reset for your account.</p>
    <p>Please click the following link to reset your password:</p>
    <p><a href="{reset_link}">{reset_link}</a></p>
    <p>This link will expire in {self.link_ttl_minutes} minutes.</p>
    <p>If you did not request this, please ignore this email.</p>
  </body>
</html>
        """
        message.attach(MIMEText(text, "plain"))
        message.attach(MIMEText(html, "html"))
        return message

    def _send_kwargs(self) -> dict:
        send_kwargs = {
            "hostname": self.config.host,
            "port": self.config.port,
            "username": self.config.user,
            "password": self.config.password,
            "timeout": self.config.timeout,
        }
        if self.config.use_tls:
            # Port 465 uses direct TLS, everything else STARTTLS
            if self.config.port == 465:
                send_kwargs["use_tls"] = True
            else:
                send_kwargs["start_tls"] = True
        return send_kwargs

    async def send_password_reset_email(self, email: str, reset_token: str) -> None:
        """
        Send password reset email to user.

        Args:
            email: User's email address
            reset_token: JWT token for password reset

        Raises:
            NotificationError: If SMTP is not configured or the transport fails.
        """
        if not self.config.is_configured:
            logger.warning("SMTP not configured - cannot send password reset email")
            raise NotificationError("Failed to send password reset email")

        message = self.build_password_reset_message(email, reset_token)
        try:
            await aiosmtplib.send(message, **self._send_kwargs())
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Failed to send password reset email: %s", e)
            raise NotificationError("Failed to send password reset email") from e
