"""Trigger site — turns node state transitions into notifications."""

from __future__ import annotations

import structlog

from node_notifier.models import Identity, Node, NodeEvent
from node_notifier.notifications.notification import (
    Mailer,
    notification_for,
    temporarily_offline_notification,
)

logger = structlog.get_logger(__name__)


class NodeStateListener:
    """Notify a node's configured recipients whenever it changes state.

    Every handler is fire-and-forget: delivery problems are logged by the
    notification itself and never reach the caller.
    """

    def __init__(self, mailer: Mailer, root_url: str | None = None) -> None:
        self._mailer = mailer
        self._root_url = root_url

    def on_offline(self, node: Node, initiator: Identity | None = None) -> None:
        self._notify(NodeEvent.OFFLINE, node, initiator)

    def on_online(self, node: Node, initiator: Identity | None = None) -> None:
        self._notify(NodeEvent.ONLINE, node, initiator)

    def on_temporarily_offline(
        self,
        node: Node,
        cause: str | None = None,
        initiator: Identity | None = None,
    ) -> None:
        logger.debug("listener.node_temporarily_offline", node=node.name, cause=cause)
        temporarily_offline_notification(
            self._mailer, node, self._root_url, initiator, cause=cause,
        ).send()

    def _notify(self, event: NodeEvent, node: Node, initiator: Identity | None) -> None:
        logger.debug("listener.node_state_changed", node=node.name, state=event.value)
        notification_for(event, self._mailer, node, self._root_url, initiator).send()
