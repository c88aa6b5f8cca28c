"""
QuickJob - Outgoing Email

SMTP delivery via aiosmtplib. A Mailer is built once from settings and
handed to whatever needs to send mail; it never reads settings itself.
"""

import logging
import uuid
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional, Tuple

import aiosmtplib
from fastapi import Request

logger = logging.getLogger(__name__)


class Mailer:
    """
    Sends plain-text/HTML email over SMTP.

    Without a username and password the mailer runs in development mode
    and logs the message instead of sending it.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        from_email: str,
        from_name: str,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.from_name = from_name

    @classmethod
    def from_settings(cls, settings) -> "Mailer":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            from_email=settings.SMTP_FROM_EMAIL,
            from_name=settings.SMTP_FROM_NAME,
        )

    @property
    def development_mode(self) -> bool:
        return not self.username or not self.password

    async def send(
        self,
        to_email: str,
        subject: str,
        text_content: str,
        html_content: Optional[str] = None,
    ) -> Tuple[bool, Optional[str]]:
        """
        Send an email.

        Returns a tuple of (success, message_id). Delivery failures are
        logged and reported as (False, None); they never raise.
        """
        if self.development_mode:
            mock_message_id = f"dev-{uuid.uuid4().hex[:16]}"
            logger.info(
                "EMAIL (development mode) to=%s subject=%r id=%s\n%s",
                to_email, subject, mock_message_id, text_content,
            )
            return True, mock_message_id

        try:
            message_id = f"smtp-{uuid.uuid4().hex}"

            message = MIMEMultipart("alternative")
            message["Subject"] = subject
            message["From"] = f"{self.from_name} <{self.from_email}>"
            message["To"] = to_email
            message["Message-ID"] = f"<{message_id}@quickjob.app>"

            message.attach(MIMEText(text_content, "plain"))
            if html_content:
                message.attach(MIMEText(html_content, "html"))

            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=True,
            )
            return True, message_id

        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            return False, None


def get_mailer(request: Request) -> Mailer:
    """Dependency returning the application's configured mailer."""
    return request.app.state.mailer


# =============================================================================
# TEMPLATES
# =============================================================================

def get_verification_code_email(code: str) -> tuple[str, str]:
    """Returns: (subject, text_content)"""
    subject = "Verify your QuickJob account"
    text_content = f"Your verification code is: {code}"
    return subject, text_content


async def send_verification_email(mailer: Mailer, email: str, code: str) -> bool:
    subject, text_content = get_verification_code_email(code)
    sent, _ = await mailer.send(email, subject, text_content)
    return sent
