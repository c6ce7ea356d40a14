"""Node state-change notifications.

Architecture
~~~~~~~~~~~~
* **NotificationBuilder** — mutable staging area.  Subject, body and
  recipients are public; url, name, initiator and extra preamble details
  are staged only by the event factories in this module.
* **Notification** — immutable snapshot of a builder.  Renders the mail
  subject/body and hands itself to the :class:`Mailer` on :meth:`send`.
* **offline_notification() / online_notification() /
  temporarily_offline_notification()** — one factory per :class:`NodeEvent`,
  each staging its own default subject, body and preamble entries.

Rendered body layout::

    Url: <root url><node url>
    Initiator: <initiator id>
    <extra key>: <extra value>


    <free-text body>
"""

from __future__ import annotations

from dataclasses import dataclass, field
from email.message import EmailMessage
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

import structlog

from node_notifier.models import Identity, Node, NodeEvent
from node_notifier.notifications.errors import AddressSyntaxError, DeliveryError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = structlog.get_logger(__name__)

SUBJECT_PREFIX = "node-offline-plugin: "


class Mailer(Protocol):
    """Transport capability consumed by :meth:`Notification.send`.

    ``send`` returns the message it handed over, or ``None`` when nothing
    was sent.  It may only fail with :class:`AddressSyntaxError` or
    :class:`DeliveryError`.
    """

    def send(self, notification: Notification) -> EmailMessage | None: ...

    def default_initiator(self) -> Identity: ...


# ── Builder ───────────────────────────────────────────────────


class NotificationBuilder:
    """Stage the fields of a :class:`Notification` before freezing them."""

    def __init__(
        self,
        mailer: Mailer,
        root_url: str | None = None,
        *,
        event: NodeEvent | None = None,
    ) -> None:
        self.mailer = mailer
        self.root_url = "/" if root_url is None else root_url
        self.event = event

        self._subject = ""
        self._body = ""
        self._recipients: str | None = None

        self._url = ""
        self._name = ""
        self._initiator: Identity = mailer.default_initiator()
        self._details: dict[str, str] = {}

    # ── Public configuration ──────────────────────────────────

    def subject(self, subject: str) -> NotificationBuilder:
        self._subject = subject
        return self

    def body(self, body: str) -> NotificationBuilder:
        self._body = body
        return self

    def recipients(self, recipients: str | None) -> NotificationBuilder:
        self._recipients = recipients
        return self

    # ── Event-type construction (module internal) ─────────────

    def _set_url(self, url: str) -> NotificationBuilder:
        self._url = url
        return self

    def _set_name(self, name: str) -> NotificationBuilder:
        self._name = name
        return self

    def _set_initiator(self, initiator: Identity) -> NotificationBuilder:
        self._initiator = initiator
        return self

    def _set_detail(self, key: str, value: str) -> NotificationBuilder:
        self._details[key] = value
        return self

    # ── Build / send ──────────────────────────────────────────

    def build(self) -> Notification:
        return Notification(
            subject=self._subject,
            body=self._body,
            recipients=self._recipients,
            resource_url=self._url,
            resource_name=self._name,
            initiator=self._initiator,
            root_url=self.root_url,
            details=MappingProxyType(dict(self._details)),
            event=self.event,
            mailer=self.mailer,
        )

    def send(self) -> None:
        """Shorthand for ``build().send()``."""
        self.build().send()


# ── Notification ──────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Notification:
    """One event-triggered message; read-only once built."""

    subject: str
    body: str
    recipients: str | None
    resource_url: str
    resource_name: str
    initiator: Identity
    root_url: str
    mailer: Mailer = field(repr=False, compare=False)
    details: Mapping[str, str] = field(default_factory=dict)
    event: NodeEvent | None = None

    def __post_init__(self) -> None:
        if self.initiator is None:
            raise ValueError("notification initiator must be set")

    @property
    def artefact_url(self) -> str:
        return self.root_url + self.resource_url

    def should_notify(self) -> bool:
        # An empty string still notifies; only an unset value suppresses.
        return self.recipients is not None

    def pairs(self) -> dict[str, str]:
        """Ordered preamble entries rendered ahead of the body."""
        pairs = {
            "Url": self.artefact_url,
            "Initiator": self.initiator.id,
        }
        pairs.update(self.details)
        return pairs

    @property
    def mail_subject(self) -> str:
        return SUBJECT_PREFIX + self.subject

    @property
    def mail_body(self) -> str:
        preamble = "".join(f"{key}: {value}\n" for key, value in self.pairs().items())
        return preamble + "\n\n" + self.body

    def send(self) -> None:
        """Deliver through the mailer.  Failures are logged, never raised."""
        if not self.should_notify():
            return

        try:
            message = self.mailer.send(self)
        except AddressSyntaxError as exc:
            logger.info(
                "notification.address_invalid",
                subject=self.subject,
                recipients=self.recipients,
                error=str(exc),
                exc_info=True,
            )
            return
        except DeliveryError as exc:
            logger.info(
                "notification.delivery_failed",
                subject=self.subject,
                error=str(exc),
                exc_info=True,
            )
            return

        if message is not None:
            logger.info("notification.notified", subject=self.subject, node=self.resource_name)


# ── Event factories ───────────────────────────────────────────


def _event_builder(
    event: NodeEvent,
    mailer: Mailer,
    node: Node,
    root_url: str | None,
    initiator: Identity | None,
) -> NotificationBuilder:
    builder = (
        NotificationBuilder(mailer, root_url, event=event)
        ._set_url(node.url)
        ._set_name(node.name)
        .recipients(node.recipients)
    )
    if initiator is not None:
        builder._set_initiator(initiator)
    return builder


def offline_notification(
    mailer: Mailer,
    node: Node,
    root_url: str | None = None,
    initiator: Identity | None = None,
) -> NotificationBuilder:
    """Builder for a node that lost its connection."""
    builder = _event_builder(NodeEvent.OFFLINE, mailer, node, root_url, initiator)
    builder.subject(f"{node.name} went offline")
    builder.body(f"Node {node.name} is no longer connected.")
    if node.offline_cause:
        builder._set_detail("Cause", node.offline_cause)
    return builder


def online_notification(
    mailer: Mailer,
    node: Node,
    root_url: str | None = None,
    initiator: Identity | None = None,
) -> NotificationBuilder:
    """Builder for a node that is connected again."""
    builder = _event_builder(NodeEvent.ONLINE, mailer, node, root_url, initiator)
    builder.subject(f"{node.name} came back online")
    builder.body(f"Node {node.name} is connected again.")
    return builder


def temporarily_offline_notification(
    mailer: Mailer,
    node: Node,
    root_url: str | None = None,
    initiator: Identity | None = None,
    cause: str | None = None,
) -> NotificationBuilder:
    """Builder for a node an operator took out of service on purpose."""
    cause = cause or node.offline_cause
    builder = _event_builder(NodeEvent.TEMPORARILY_OFFLINE, mailer, node, root_url, initiator)
    builder.subject(f"{node.name} marked temporarily offline")
    builder.body(cause or f"Node {node.name} was marked temporarily offline.")
    if cause:
        builder._set_detail("Cause", cause)
    return builder


_FACTORIES = {
    NodeEvent.OFFLINE: offline_notification,
    NodeEvent.ONLINE: online_notification,
    NodeEvent.TEMPORARILY_OFFLINE: temporarily_offline_notification,
}


def notification_for(
    event: NodeEvent,
    mailer: Mailer,
    node: Node,
    root_url: str | None = None,
    initiator: Identity | None = None,
) -> NotificationBuilder:
    """Dispatch to the factory registered for *event*."""
    return _FACTORIES[event](mailer, node, root_url, initiator)
