# Overview: Outbound email over SMTP.

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from ..errors import EmailDeliveryError, EmailNotConfiguredError


logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465

# Relays where a plaintext login never leaves the machine
LOCAL_HOSTS = {"localhost", "127.0.0.1", "::1"}


class EmailSender(Protocol):
    def send(self, to_address: str, subject: str, html_body: str) -> None: ...


class SmtpEmailSender:
    """
    Sends HTML email through an SMTP relay.

    With no server configured every send fails with EmailNotConfiguredError;
    the app still starts and everything else keeps working.
    """

    def __init__(
        self,
        host: str = "",
        port: int = 587,
        username: str = "",
        password: str = "",
        from_address: str = "",
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address or username
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> "SmtpEmailSender":
        return cls(
            host=config.get("EMAIL_SMTP_SERV", ""),
            port=config.get("EMAIL_SMTP_PORT", 587),
            username=config.get("EMAIL_USERNAME", ""),
            password=config.get("EMAIL_PASSWORD", ""),
            from_address=config.get("EMAIL_FROM_ADDR", ""),
        )

    @property
    def configured(self) -> bool:
        return bool(self.host)

    def _connect(self):
        """Open the relay connection; returns (smtp, encrypted)."""
        if self.port == IMPLICIT_TLS_PORT:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout), True
        return smtplib.SMTP(self.host, self.port, timeout=self.timeout), False

    def send(self, to_address: str, subject: str, html_body: str) -> None:
        """
        Send one HTML message.

        Port 465 uses implicit TLS, any other port upgrades with STARTTLS when
        the server offers it. Credentials are only sent over an encrypted
        connection unless the relay is on this machine.
        """
        if not self.configured:
            raise EmailNotConfiguredError()

        message = EmailMessage()
        message["From"] = self.from_address
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(html_body, subtype="html")

        try:
            smtp, encrypted = self._connect()
            with smtp:
                smtp.ehlo()
                if not encrypted and smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
                    encrypted = True
                if self.username:
                    if not encrypted and self.host not in LOCAL_HOSTS:
                        logger.error("SMTP server %s offers no TLS, not sending credentials", self.host)
                        raise EmailDeliveryError("failed sending email - SMTP server does not support TLS")
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed sending email to %s: %s", to_address, exc)
            raise EmailDeliveryError(f"failed sending email - {exc}") from exc

        logger.info("Sent email %r to %s", subject, to_address)
