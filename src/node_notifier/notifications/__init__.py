"""Notification sub-package — node state-change mails.

Exports the builder/notification pair, the event factories, the address
validator and the SMTP transport.
"""

from node_notifier.notifications.errors import AddressSyntaxError, DeliveryError, NotificationError
from node_notifier.notifications.mailer import SmtpMailer
from node_notifier.notifications.notification import (
    SUBJECT_PREFIX,
    Mailer,
    Notification,
    NotificationBuilder,
    notification_for,
    offline_notification,
    online_notification,
    temporarily_offline_notification,
)
from node_notifier.notifications.validation import (
    ValidationKind,
    ValidationResult,
    parse_address_list,
    validate_mail_addresses,
)

__all__ = [
    "SUBJECT_PREFIX",
    "AddressSyntaxError",
    "DeliveryError",
    "Mailer",
    "Notification",
    "NotificationBuilder",
    "NotificationError",
    "SmtpMailer",
    "ValidationKind",
    "ValidationResult",
    "notification_for",
    "offline_notification",
    "online_notification",
    "parse_address_list",
    "temporarily_offline_notification",
    "validate_mail_addresses",
]
