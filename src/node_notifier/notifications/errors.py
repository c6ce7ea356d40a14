"""Failures a mail transport may report while delivering a notification."""


class NotificationError(Exception):
    """Base class for contained, best-effort delivery failures."""


class AddressSyntaxError(NotificationError):
    """The recipients value could not be parsed as an address list."""


class DeliveryError(NotificationError):
    """The transport failed to hand the message over for delivery."""
