"""Notification sinks: SendGrid for production, logging for development."""

import asyncio
import logging

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from src.app.services.notification_sink import NotificationSink

logger = logging.getLogger(__name__)


class SendGridNotificationSink(NotificationSink):
    """Sends transactional emails via SendGrid."""

    def __init__(self, api_key: str, from_address: str, from_name: str):
        self.api_key = api_key
        self.from_address = from_address
        self.from_name = from_name

    def _send_sync(self, to_email: str, subject: str, html_content: str) -> bool:
        if not self.api_key:
            logger.warning("SendGrid API key not configured, skipping email send")
            return False

        message = Mail(
            from_email=(self.from_address, self.from_name),
            to_emails=to_email,
            subject=subject,
            html_content=html_content,
        )

        try:
            sg = SendGridAPIClient(self.api_key)
            response = sg.send(message)
            logger.info(f"Email sent to {to_email}, status: {response.status_code}")
            return response.status_code in (200, 201, 202)
        except Exception:
            logger.exception(f"Failed to send email to {to_email}")
            return False

    async def send(self, to_email: str, subject: str, html_content: str) -> bool:
        return await asyncio.to_thread(self._send_sync, to_email, subject, html_content)


class LoggingNotificationSink(NotificationSink):
    """Development sink: writes the message subject to the log and accepts it."""

    async def send(self, to_email: str, subject: str, html_content: str) -> bool:
        logger.info(f"[email] to={to_email} subject={subject!r}")
        logger.debug(html_content)
        return True
