import aiosmtplib
import pytest
from twilio.base.exceptions import TwilioException

from backoffice.application.ports.notification_sender import Notification
from backoffice.core.config import Settings
from backoffice.dependencies import build_notification_sender
from backoffice.exceptions import NotificationError
from backoffice.infrastructure.notifications import smtp_sender
from backoffice.infrastructure.notifications.composite_sender import CompositeNotificationSender
from backoffice.infrastructure.notifications.logging_sender import LoggingNotificationSender
from backoffice.infrastructure.notifications.smtp_sender import SmtpEmailSender
from backoffice.infrastructure.notifications.twilio_sender import TwilioSmsSender

OTP = Notification(
    kind="otp",
    email="alice@example.com",
    subject="Verify Your Account",
    body="Your verification code is: 123456",
    name="Alice",
    phone="+15551234567",
)


def _smtp_settings(**overrides):
    values = dict(SMTP_HOST="smtp.test", SMTP_PORT=2525, SMTP_USER="mailer", SMTP_PASSWORD="pw", EMAIL_FROM="no-reply@test")
    values.update(overrides)
    return Settings(**values)


async def test_smtp_sender_builds_and_sends_message(monkeypatch):
    calls = []

    async def fake_send(message, **kwargs):
        calls.append((message, kwargs))

    monkeypatch.setattr(smtp_sender.aiosmtplib, "send", fake_send)
    await SmtpEmailSender(_smtp_settings()).send(OTP)

    message, kwargs = calls[0]
    assert message["To"] == "alice@example.com"
    assert message["Subject"].startswith("Verify Your Account")
    assert kwargs["hostname"] == "smtp.test"
    assert kwargs["port"] == 2525
    assert "123456" in message.as_string()


async def test_smtp_sender_not_configured():
    with pytest.raises(NotificationError):
        await SmtpEmailSender(_smtp_settings(SMTP_USER="", SMTP_PASSWORD="")).send(OTP)


async def test_smtp_sender_wraps_transport_errors(monkeypatch):
    async def failing_send(message, **kwargs):
        raise aiosmtplib.SMTPException("connection refused")

    monkeypatch.setattr(smtp_sender.aiosmtplib, "send", failing_send)
    with pytest.raises(NotificationError):
        await SmtpEmailSender(_smtp_settings()).send(OTP)


class FakeMessages:
    def __init__(self, error=None):
        self.created = []
        self.error = error

    def create(self, **kwargs):
        if self.error:
            raise self.error
        self.created.append(kwargs)


class FakeTwilioClient:
    def __init__(self, error=None):
        self.messages = FakeMessages(error)


async def test_twilio_sender_sends_otp_sms():
    client = FakeTwilioClient()
    sender = TwilioSmsSender(Settings(TWILIO_PHONE_NUMBER="+15550000000"), client=client)
    await sender.send(OTP)
    assert client.messages.created == [{"to": "+15551234567", "from_": "+15550000000", "body": OTP.body}]


async def test_twilio_sender_skips_reset_mail_and_missing_phone():
    client = FakeTwilioClient()
    sender = TwilioSmsSender(Settings(TWILIO_PHONE_NUMBER="+15550000000"), client=client)
    await sender.send(Notification(kind="reset_password", email="a@example.com", subject="s", body="b", phone="+15551234567"))
    await sender.send(Notification(kind="otp", email="a@example.com", subject="s", body="b"))
    assert client.messages.created == []


async def test_twilio_sender_wraps_errors():
    sender = TwilioSmsSender(Settings(TWILIO_PHONE_NUMBER="+15550000000"), client=FakeTwilioClient(TwilioException("boom")))
    with pytest.raises(NotificationError):
        await sender.send(OTP)


async def test_composite_sender_fans_out():
    received = []

    class Recorder:
        def __init__(self, label):
            self.label = label

        async def send(self, notification):
            received.append(self.label)

    await CompositeNotificationSender([Recorder("a"), Recorder("b")]).send(OTP)
    assert received == ["a", "b"]


def test_build_notification_sender_defaults_to_log():
    assert isinstance(build_notification_sender(Settings(NOTIFICATION_BACKENDS="")), LoggingNotificationSender)
    assert isinstance(build_notification_sender(Settings(NOTIFICATION_BACKENDS="log")), LoggingNotificationSender)


def test_build_notification_sender_composes_backends():
    sender = build_notification_sender(_smtp_settings(NOTIFICATION_BACKENDS="log, smtp"))
    assert isinstance(sender, CompositeNotificationSender)
    assert [type(s) for s in sender.senders] == [LoggingNotificationSender, SmtpEmailSender]


def test_build_notification_sender_rejects_unknown_backend():
    with pytest.raises(ValueError):
        build_notification_sender(Settings(NOTIFICATION_BACKENDS="carrier-pigeon"))


def test_smtp_html_part_escapes_user_supplied_text():
    sender = SmtpEmailSender(_smtp_settings())
    hostile = Notification(
        kind="otp",
        email="victim@example.com",
        subject="Verify Your Account",
        body="Your verification code is: 123456",
        name='<a href="http://evil">Click</a>',
    )
    message = sender._build_message(hostile)
    html_part = [p for p in message.get_payload() if p.get_content_type() == "text/html"][0]
    markup = html_part.get_payload(decode=True).decode()
    assert "<a href" not in markup
    assert "&lt;a href=&quot;http://evil&quot;&gt;Click&lt;/a&gt;" in markup


async def test_logging_sender_keeps_codes_out_of_info_logs(caplog):
    caplog.set_level("DEBUG", logger="backoffice.infrastructure.notifications.logging_sender")
    await LoggingNotificationSender().send(OTP)
    info = [r.getMessage() for r in caplog.records if r.levelname == "INFO"]
    debug = [r.getMessage() for r in caplog.records if r.levelname == "DEBUG"]
    assert info and all("123456" not in m for m in info)
    assert any("123456" in m for m in debug)


def test_log_only_backend_warns_outside_debug(caplog):
    caplog.set_level("WARNING", logger="backoffice.dependencies")
    build_notification_sender(Settings(NOTIFICATION_BACKENDS="log", DEBUG=False))
    assert any("log notification backend" in r.getMessage() for r in caplog.records)
