"""Syntactic validation of delimited email-address lists.

The check is deliberately shallow: the list must parse as a mail header
address list, and every address must carry an ``@`` after a non-empty
local part.  Full RFC 5322 validation is left to the mail server.
"""

from __future__ import annotations

from dataclasses import dataclass
from email import errors, policy
from email.headerregistry import Address
from enum import Enum

from node_notifier.notifications.errors import AddressSyntaxError

_HEADER_FACTORY = policy.default.header_factory


class ValidationKind(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating a recipients value, suitable for form feedback."""

    kind: ValidationKind
    message: str = ""

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(ValidationKind.OK)

    @classmethod
    def warning(cls, message: str) -> ValidationResult:
        return cls(ValidationKind.WARNING, message)

    @classmethod
    def error(cls, message: str) -> ValidationResult:
        return cls(ValidationKind.ERROR, message)

    @property
    def is_ok(self) -> bool:
        return self.kind is ValidationKind.OK


def parse_address_list(candidate: str) -> list[Address]:
    """Parse a comma-delimited address list, display names allowed.

    Entries the header parser cannot make sense of at all raise
    :class:`AddressSyntaxError`.  Entries that merely lack a domain are
    returned as-is so callers can report them by name.
    """
    try:
        header = _HEADER_FACTORY("To", candidate)
        addresses = list(header.addresses)
    except (errors.HeaderParseError, ValueError, IndexError) as exc:
        # The header parser indexes past the end of some truncated inputs.
        raise AddressSyntaxError(str(exc) or type(exc).__name__) from exc

    for address in addresses:
        # The parser keeps unparseable chunks as empty placeholder addresses.
        if not (address.username or address.domain):
            raise AddressSyntaxError(_describe_defects(header.defects))
    return addresses


def validate_mail_addresses(candidate: str) -> ValidationResult:
    """Validate a recipients value.

    Returns a warning for an empty list, an error naming the first address
    without a usable ``@`` (in input order), and OK otherwise.
    """
    try:
        addresses = parse_address_list(candidate)
    except AddressSyntaxError as exc:
        return ValidationResult.error(f"Invalid address provided: {exc}")

    if not addresses:
        return ValidationResult.warning("Empty address list provided")

    for address in addresses:
        raw = str(address)
        if raw.find("@") > 0:
            continue
        return ValidationResult.error(f"{raw} does not look like an email address")
    return ValidationResult.ok()


def _describe_defects(defects: tuple[errors.MessageDefect, ...]) -> str:
    for defect in defects:
        if isinstance(defect, errors.InvalidHeaderDefect):
            return str(defect)
    return "unparseable address in list"
