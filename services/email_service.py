"""
Transactional email through fastapi-mail.

Every public coroutine is meant to be queued with ``BackgroundTasks.add_task``:
send failures are logged and never reach the request that triggered them.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType

from core import config
from services import email_templates

logger = logging.getLogger(__name__)


def build_mail_config() -> Optional[ConnectionConfig]:
    if not config.MAIL_USERNAME:
        return None
    return ConnectionConfig(
        MAIL_USERNAME=config.MAIL_USERNAME,
        MAIL_PASSWORD=config.MAIL_PASSWORD,
        MAIL_FROM=config.MAIL_FROM,
        MAIL_FROM_NAME=config.MAIL_FROM_NAME,
        MAIL_PORT=config.MAIL_PORT,
        MAIL_SERVER=config.MAIL_SERVER,
        MAIL_STARTTLS=True,
        MAIL_SSL_TLS=False,
        USE_CREDENTIALS=True,
        VALIDATE_CERTS=True,
    )


class EmailService:
    def __init__(self, mail_config: Optional[ConnectionConfig] = None):
        self.mail_config = mail_config if mail_config is not None else build_mail_config()

    async def send(self, recipients: List[str], subject: str, html: str) -> bool:
        if self.mail_config is None:
            logger.info("Mail is not configured, skipping %r to %s", subject, recipients)
            return False

        message = MessageSchema(
            subject=subject,
            recipients=recipients,
            body=html,
            subtype=MessageType.html,
        )
        try:
            await FastMail(self.mail_config).send_message(message)
        except Exception:
            logger.exception("Failed to send %r to %s", subject, recipients)
            return False

        logger.info("Sent %r to %s", subject, recipients)
        return True

    async def send_welcome(self, email: str, name: str, teacher_name: Optional[str] = None):
        subject, html = email_templates.welcome_student(name, teacher_name)
        return await self.send([email], subject, html)

    async def notify_admin_new_student(self, name: str, email: str, registered_at: datetime):
        if not config.ADMIN_NOTIFICATION_EMAIL:
            return False
        subject, html = email_templates.admin_new_student(name, email, registered_at)
        return await self.send([config.ADMIN_NOTIFICATION_EMAIL], subject, html)

    async def send_teacher_assignment(
        self, student_email: str, student_name: str, teacher_email: str, teacher_name: str
    ):
        subject, html = email_templates.teacher_assigned_to_student(student_name, teacher_name, teacher_email)
        await self.send([student_email], subject, html)
        subject, html = email_templates.student_assigned_to_teacher(teacher_name, student_name, student_email)
        await self.send([teacher_email], subject, html)

    async def send_subscription_confirmed(
        self, email: str, name: str, package_title: str, end_date: Optional[datetime]
    ):
        subject, html = email_templates.subscription_confirmed(name, package_title, end_date)
        return await self.send([email], subject, html)
