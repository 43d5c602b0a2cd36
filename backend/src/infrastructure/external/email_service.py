"""
SMTP E-mail Service
Sends HTML mail through a blocking smtplib client off the event loop
"""
import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from loguru import logger

from core.config import settings
from application.services.email.interfaces import IEmailService


class SmtpEmailService(IEmailService):
    """SMTP delivery with exponential backoff between attempts"""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
    ):
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.user = user if user is not None else settings.SMTP_USER
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.sender = sender or settings.SMTP_FROM
        self.max_retries = max(1, max_retries or settings.EMAIL_MAX_RETRIES)
        self.base_delay = settings.EMAIL_RETRY_BASE_DELAY_SECONDS if base_delay is None else base_delay

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    async def send(self, to: str, subject: str, body: str) -> bool:
        if not self.enabled:
            logger.info(f"SMTP not configured, skipping e-mail '{subject}' to {to}")
            return False

        message = self._build_message(to, subject, body)

        for attempt in range(1, self.max_retries + 1):
            try:
                await asyncio.to_thread(self._deliver, to, message)
                logger.info(f"E-mail '{subject}' sent to {to}")
                return True
            except (smtplib.SMTPException, OSError) as e:
                if attempt == self.max_retries:
                    logger.error(f"E-mail '{subject}' to {to} failed after {attempt} attempts: {e}")
                    raise
                delay = self.base_delay * 2 ** (attempt - 1)
                logger.warning(f"E-mail attempt {attempt} to {to} failed: {e}; retrying in {delay}s")
                await asyncio.sleep(delay)

        return False

    def _build_message(self, to: str, subject: str, body: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = self.sender
        message["To"] = to
        message.attach(MIMEText(body, "html"))
        return message

    def _deliver(self, to: str, message: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=settings.SMTP_TIMEOUT_SECONDS) as server:
            server.starttls()
            if self.user and self.password:
                server.login(self.user, self.password)
            server.sendmail(self.sender, [to], message.as_string())
