"""Outbound email delivery for password-reset OTPs.

SmtpNotifier talks to a real SMTP server (STARTTLS + login) with an explicit
timeout. LogNotifier is the development fallback used when no mail account is
configured: it logs the message instead of sending it.
"""
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from app.core.config import Settings
from app.core.errors import DeliveryFailed

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Password Reset OTP"


def build_reset_message(sender: str, to_email: str, otp: str, ttl_seconds: int) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = RESET_SUBJECT
    msg["From"] = sender
    msg["To"] = to_email
    minutes = max(ttl_seconds // 60, 1)
    msg.set_content(
        f"Your OTP for password reset is: {otp}\n\n"
        f"It expires in {minutes} minutes. If you did not request this, ignore this email."
    )
    return msg


class SmtpNotifier:
    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        sender: str,
        use_tls: bool = True,
        timeout: float = 10.0,
        ttl_seconds: int = 900,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls
        self.timeout = timeout
        self.ttl_seconds = ttl_seconds

    def send_otp(self, to_email: str, otp: str) -> None:
        if not (self.username and self.password):
            logger.error("Mail credentials missing; cannot send OTP to %s", to_email)
            raise DeliveryFailed()
        msg = build_reset_message(self.sender, to_email, otp, self.ttl_seconds)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send OTP email to %s: %s", to_email, exc)
            raise DeliveryFailed() from exc
        logger.info("Sent OTP email to %s", to_email)


class LogNotifier:
    def send_otp(self, to_email: str, otp: str) -> None:
        logger.warning("Mail transport not configured (dev mode). OTP for %s: %s", to_email, otp)


def build_notifier(settings: Settings):
    if not settings.mail_configured and settings.is_development:
        logger.warning("EMAIL_USER/EMAIL_PASS unset; OTP emails will be logged, not sent")
        return LogNotifier()
    return SmtpNotifier(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.EMAIL_USER,
        password=settings.EMAIL_PASS,
        sender=settings.mail_sender,
        use_tls=settings.SMTP_TLS,
        timeout=settings.SMTP_TIMEOUT,
        ttl_seconds=settings.OTP_TTL_SECONDS,
    )
