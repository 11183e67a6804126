"""
SMTP sender tests with smtplib.SMTP replaced by a recording fake.
"""

import smtplib

import pytest

from inventory_tracker.errors import EmailDeliveryError, EmailNotConfiguredError
from inventory_tracker.services import email_service
from inventory_tracker.services.email_service import SmtpEmailSender


class FakeSMTP:
    instances = []
    supports_starttls = True
    fail_on_send = False

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.calls.append("quit")
        return False

    def ehlo(self):
        self.calls.append("ehlo")

    def has_extn(self, name):
        return name == "starttls" and self.supports_starttls

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        self.calls.append(("login", username, password))

    def send_message(self, message):
        if self.fail_on_send:
            raise smtplib.SMTPRecipientsRefused({message["To"]: (550, b"no such user")})
        self.messages.append(message)


class FakeSMTPSSL(FakeSMTP):
    """Implicit TLS connection; never advertises STARTTLS."""

    def has_extn(self, name):
        return False


@pytest.fixture(autouse=True)
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.supports_starttls = True
    FakeSMTP.fail_on_send = False
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(email_service.smtplib, "SMTP_SSL", FakeSMTPSSL)
    return FakeSMTP


def make_sender(**overrides):
    settings = {
        "host": "smtp.example.test",
        "port": 587,
        "username": "mailer@example.test",
        "password": "app-password",
    }
    settings.update(overrides)
    return SmtpEmailSender(**settings)


def test_sends_html_message_over_starttls(fake_smtp):
    make_sender().send("bob@example.com", "Inventory Password Reset", "<p>hello</p>")

    smtp = fake_smtp.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.example.test", 587)
    assert smtp.calls == ["ehlo", "starttls", "ehlo", ("login", "mailer@example.test", "app-password"), "quit"]

    message = smtp.messages[0]
    assert message["To"] == "bob@example.com"
    assert message["From"] == "mailer@example.test"
    assert message["Subject"] == "Inventory Password Reset"
    assert message.get_content_type() == "text/html"
    assert "<p>hello</p>" in message.get_content()


def test_from_address_overrides_username(fake_smtp):
    make_sender(from_address="noreply@example.test").send("bob@example.com", "s", "b")
    assert fake_smtp.instances[0].messages[0]["From"] == "noreply@example.test"


def test_skips_starttls_and_login_when_not_needed(fake_smtp):
    fake_smtp.supports_starttls = False

    make_sender(username="", from_address="noreply@example.test").send("bob@example.com", "s", "b")

    assert fake_smtp.instances[0].calls == ["ehlo", "quit"]


def test_unconfigured_sender_never_connects(fake_smtp):
    sender = SmtpEmailSender()

    assert not sender.configured
    with pytest.raises(EmailNotConfiguredError):
        sender.send("bob@example.com", "s", "b")
    assert fake_smtp.instances == []


def test_smtp_failure_becomes_delivery_error(fake_smtp):
    fake_smtp.fail_on_send = True

    with pytest.raises(EmailDeliveryError):
        make_sender().send("bob@example.com", "s", "b")


def test_connection_failure_becomes_delivery_error(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(email_service.smtplib, "SMTP", refuse)

    with pytest.raises(EmailDeliveryError):
        make_sender().send("bob@example.com", "s", "b")


def test_from_config():
    sender = SmtpEmailSender.from_config({
        "EMAIL_SMTP_SERV": "smtp.example.test",
        "EMAIL_SMTP_PORT": 2525,
        "EMAIL_USERNAME": "u",
        "EMAIL_PASSWORD": "p",
        "EMAIL_FROM_ADDR": "",
    })
    assert (sender.host, sender.port, sender.from_address) == ("smtp.example.test", 2525, "u")
    assert sender.configured


def test_refuses_login_without_tls(fake_smtp):
    fake_smtp.supports_starttls = False

    with pytest.raises(EmailDeliveryError, match="does not support TLS"):
        make_sender(username="u", password="secret").send("bob@example.com", "s", "b")

    smtp = fake_smtp.instances[0]
    assert not any(isinstance(call, tuple) and call[0] == "login" for call in smtp.calls)
    assert smtp.messages == []


def test_local_relay_may_log_in_without_tls(fake_smtp):
    fake_smtp.supports_starttls = False

    make_sender(host="localhost", username="u", password="secret").send("bob@example.com", "s", "b")

    assert ("login", "u", "secret") in fake_smtp.instances[0].calls


def test_port_465_uses_implicit_tls(fake_smtp):
    make_sender(port=465).send("bob@example.com", "s", "b")

    smtp = fake_smtp.instances[0]
    assert isinstance(smtp, FakeSMTPSSL)
    assert smtp.port == 465
    assert "starttls" not in smtp.calls
    assert ("login", "mailer@example.test", "app-password") in smtp.calls
    assert len(smtp.messages) == 1
