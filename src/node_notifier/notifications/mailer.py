"""SMTP-backed :class:`Mailer` implementation."""

from __future__ import annotations

import smtplib
import ssl
from email.message import EmailMessage
from typing import TYPE_CHECKING

import structlog

from node_notifier.models import Identity, User
from node_notifier.notifications.errors import AddressSyntaxError, DeliveryError
from node_notifier.notifications.validation import parse_address_list

if TYPE_CHECKING:
    from node_notifier.config import Settings
    from node_notifier.notifications.notification import Notification

logger = structlog.get_logger(__name__)


class SmtpMailer:
    """Turn notifications into plain-text mails and hand them to an SMTP relay.

    Address problems surface as :class:`AddressSyntaxError`, everything the
    relay or the network complains about as :class:`DeliveryError`.  An
    empty recipients value sends nothing and returns ``None``.
    """

    def __init__(
        self,
        smtp_host: str,
        sender: str,
        *,
        smtp_port: int = 587,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        use_ssl: bool = False,
        timeout: float = 30.0,
        default_initiator: Identity | None = None,
    ) -> None:
        if not smtp_host:
            raise ValueError("SMTP_HOST must be configured")
        if not sender:
            raise ValueError("MAIL_FROM must be configured")
        self._host = smtp_host
        self._port = smtp_port
        self._user = username
        self._password = password
        self._use_tls = use_tls
        self._use_ssl = use_ssl
        self._timeout = timeout
        self._sender = sender
        self._default_initiator = default_initiator or User(id="SYSTEM")

    @classmethod
    def from_settings(cls, settings: Settings) -> SmtpMailer:
        return cls(
            settings.smtp_host,
            settings.mail_from,
            smtp_port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            use_ssl=settings.smtp_use_ssl,
            timeout=settings.smtp_timeout,
            default_initiator=User(id=settings.default_initiator),
        )

    def default_initiator(self) -> Identity:
        return self._default_initiator

    def compose(self, notification: Notification) -> EmailMessage | None:
        """Build the outgoing message, or ``None`` when nobody is addressed."""
        addresses = parse_address_list(notification.recipients or "")
        if not addresses:
            return None
        for address in addresses:
            if not address.domain:
                raise AddressSyntaxError(f"{address} does not look like an email address")

        message = EmailMessage()
        message["Subject"] = notification.mail_subject
        message["From"] = self._sender
        message["To"] = addresses
        message.set_content(notification.mail_body)
        return message

    def send(self, notification: Notification) -> EmailMessage | None:
        message = self.compose(notification)
        if message is None:
            logger.debug("mailer.no_recipients", subject=notification.mail_subject)
            return None

        try:
            self._deliver(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(f"{type(exc).__name__}: {exc}") from exc

        logger.debug("mailer.sent", host=self._host, to=str(message["To"]))
        return message

    # ── Internals ─────────────────────────────────────────────

    def _deliver(self, message: EmailMessage) -> None:
        if self._use_ssl:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(self._host, self._port, timeout=self._timeout, context=context) as server:
                self._maybe_login(server)
                server.send_message(message)
        else:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                if self._use_tls:
                    server.starttls(context=ssl.create_default_context())
                self._maybe_login(server)
                server.send_message(message)

    def _maybe_login(self, server: smtplib.SMTP) -> None:
        # Some relays accept unauthenticated mail from trusted networks.
        if self._user and self._password:
            server.login(self._user, self._password)
