"""Shared pytest fixtures."""

from __future__ import annotations

from email.message import EmailMessage

import pytest

from node_notifier.models import Identity, Node, RecipientsProperty, User
from node_notifier.notifications.notification import Notification


class RecordingMailer:
    """Mailer double that records every notification it is asked to send."""

    def __init__(
        self,
        *,
        initiator: Identity | None = None,
        error: Exception | None = None,
        handle: bool = True,
    ) -> None:
        self.sent: list[Notification] = []
        self._initiator = initiator or User(id="SYSTEM")
        self._error = error
        self._handle = handle

    def default_initiator(self) -> Identity:
        return self._initiator

    def send(self, notification: Notification) -> EmailMessage | None:
        self.sent.append(notification)
        if self._error is not None:
            raise self._error
        if not self._handle:
            return None
        message = EmailMessage()
        message["Subject"] = notification.mail_subject
        message.set_content(notification.mail_body)
        return message


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def alice() -> User:
    return User(id="alice")


@pytest.fixture
def watched_node() -> Node:
    return Node(
        name="agent-42",
        url="computer/agent-42/",
        notify=RecipientsProperty(email_recipients="ops@example.org, Dev Team <dev@example.org>"),
    )


@pytest.fixture
def unwatched_node() -> Node:
    return Node(name="agent-7", url="computer/agent-7/")


@pytest.fixture
def mailer_factory() -> type[RecordingMailer]:
    return RecordingMailer
