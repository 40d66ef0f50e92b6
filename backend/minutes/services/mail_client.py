from __future__ import annotations

from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional, Sequence
import logging
import smtplib
import ssl

from minutes.config import Settings
from minutes.errors import DeliveryError

logger = logging.getLogger("minutes.services.mail")


class MailClient:
    """Sends one plain-text message per call over SMTP.

    Transport settings are taken from ``Settings`` when the message is sent.
    ``smtp_factory`` replaces ``smtplib.SMTP``/``SMTP_SSL`` (used by tests).
    """

    def __init__(self, settings: Settings, smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None) -> None:
        self.settings = settings
        self.smtp_factory = smtp_factory

    def _connect(self) -> smtplib.SMTP:
        s = self.settings
        context = ssl.create_default_context()
        if s.smtp_secure:
            factory = self.smtp_factory or smtplib.SMTP_SSL
            return factory(s.smtp_host, s.smtp_port, context=context)
        factory = self.smtp_factory or smtplib.SMTP
        server = factory(s.smtp_host, s.smtp_port)
        try:
            server.ehlo()
            if server.has_extn("starttls"):
                server.starttls(context=context)
                server.ehlo()
        except BaseException:
            server.close()
            raise
        return server

    def build_message(self, recipients: Sequence[str], subject: str, body: str) -> EmailMessage:
        sender = self.settings.sender
        msg = EmailMessage()
        if sender:
            msg["From"] = sender
        msg["To"] = ",".join(recipients)
        msg["Subject"] = subject
        # Domain from the sender address, so no hostname lookup happens here
        domain = sender.rsplit("@", 1)[-1] if sender and "@" in sender else self.settings.smtp_host
        msg["Message-ID"] = make_msgid(domain=domain)
        msg.set_content(body)
        return msg

    def send(self, recipients: Sequence[str], subject: str, body: str) -> str:
        s = self.settings
        msg = self.build_message(recipients, subject, body)
        try:
            with self._connect() as server:
                # Credentials are only used when both halves are configured
                if s.smtp_user and s.smtp_pass:
                    server.login(s.smtp_user, s.smtp_pass)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Mail delivery via %s:%s failed: %s", s.smtp_host, s.smtp_port, exc)
            raise DeliveryError(f"Mail delivery failed: {exc}") from exc
        return msg.get("Message-ID") or "sent"
