import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, Mock, patch

from fastapi_mail import ConnectionConfig

from services import email_templates
from services.email_service import EmailService


def mail_config():
    return ConnectionConfig(
        MAIL_USERNAME="mailer",
        MAIL_PASSWORD="secret",
        MAIL_FROM="no-reply@qodwa.com",
        MAIL_PORT=587,
        MAIL_SERVER="smtp.example.com",
        MAIL_STARTTLS=True,
        MAIL_SSL_TLS=False,
    )


def test_send_is_skipped_without_mail_config():
    service = EmailService()
    service.mail_config = None

    with patch("services.email_service.FastMail") as fast_mail:
        assert asyncio.run(service.send(["a@example.com"], "Hi", "<p>Hi</p>")) is False
    fast_mail.assert_not_called()


def test_send_failure_is_logged_not_raised(caplog):
    mailer = Mock()
    mailer.send_message = AsyncMock(side_effect=ConnectionError("smtp down"))

    with patch("services.email_service.FastMail", return_value=mailer):
        sent = asyncio.run(EmailService(mail_config()).send_welcome("a@example.com", "Maryam"))

    assert sent is False
    assert "Failed to send" in caplog.text


def test_send_success():
    mailer = Mock()
    mailer.send_message = AsyncMock(return_value=None)

    with patch("services.email_service.FastMail", return_value=mailer):
        sent = asyncio.run(EmailService(mail_config()).send(["a@example.com"], "Hi", "<p>Hi</p>"))

    assert sent is True
    message = mailer.send_message.call_args.args[0]
    assert message.subject == "Hi"


def test_teacher_assignment_notifies_both_sides():
    service = EmailService(mail_config())
    service.send = AsyncMock(return_value=True)

    asyncio.run(service.send_teacher_assignment("s@example.com", "Maryam", "t@example.com", "Ustadh Ali"))

    recipients = [c.args[0] for c in service.send.call_args_list]
    assert recipients == [["s@example.com"], ["t@example.com"]]


def test_templates_mention_names():
    subject, html = email_templates.welcome_student("Maryam", "Ustadh Ali")
    assert "Maryam" in html and "Ustadh Ali" in html

    subject, html = email_templates.subscription_confirmed("Maryam", "Standard", datetime(2025, 7, 15))
    assert "Standard" in html
