"""Shared models: actor identities, host nodes and their notification property."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from node_notifier.notifications.validation import ValidationResult

# ── Identities ────────────────────────────────────────────────


@runtime_checkable
class Identity(Protocol):
    """Opaque actor handle; only its textual ``id`` is ever read."""

    @property
    def id(self) -> str: ...


class User(BaseModel):
    """Account credited with a node state change."""

    model_config = ConfigDict(frozen=True)

    id: str


# ── Events ────────────────────────────────────────────────────


class NodeEvent(str, Enum):
    """Node state transitions that produce a notification."""

    OFFLINE = "offline"
    ONLINE = "online"
    TEMPORARILY_OFFLINE = "temporarily-offline"


# ── Host node model ───────────────────────────────────────────


class RecipientsProperty(BaseModel):
    """Per-node list of addresses to notify when the node's state changes."""

    model_config = ConfigDict(frozen=True)

    DISPLAY_NAME: ClassVar[str] = "Notify when node online status changes"
    FORM_FIELD: ClassVar[str] = "emailRecipients"

    email_recipients: str

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> RecipientsProperty | None:
        """Bind the property from submitted form data.

        An empty address list removes the property altogether, so the node
        is not notified at all.
        """
        value = form[cls.FORM_FIELD]
        if not value:
            return None
        return cls(email_recipients=value)

    @staticmethod
    def check_email_recipients(value: str) -> ValidationResult:
        """Form-time feedback for the recipients field."""
        # Imported here: the notifications package imports this module.
        from node_notifier.notifications.validation import validate_mail_addresses

        return validate_mail_addresses(value)


class Node(BaseModel):
    """A managed compute resource as seen by the notifier."""

    name: str
    url: str = ""  # relative to the host root url, e.g. "computer/agent-1/"
    offline_cause: str | None = None
    notify: RecipientsProperty | None = None

    @property
    def recipients(self) -> str | None:
        return self.notify.email_recipients if self.notify is not None else None
