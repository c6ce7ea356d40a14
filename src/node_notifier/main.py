"""Command-line entrypoint — validate recipient lists or send a notification."""

from __future__ import annotations

import argparse
import sys

from node_notifier.config import get_settings
from node_notifier.logger import setup_logging
from node_notifier.models import Node, NodeEvent, RecipientsProperty, User
from node_notifier.notifications import (
    SmtpMailer,
    ValidationKind,
    notification_for,
    validate_mail_addresses,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="node-notifier",
        description="Email notifications for node online/offline transitions.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── check-recipients ──────────────────────────────────────
    check_parser = sub.add_parser("check-recipients", help="Validate a recipient list.")
    check_parser.add_argument("recipients")

    # ── notify ────────────────────────────────────────────────
    notify_parser = sub.add_parser("notify", help="Send one state-change notification.")
    notify_parser.add_argument("--node", required=True, help="Node display name.")
    notify_parser.add_argument("--url", default="", help="Node page, relative to ROOT_URL.")
    notify_parser.add_argument(
        "--event",
        choices=[e.value for e in NodeEvent],
        default=NodeEvent.OFFLINE.value,
    )
    notify_parser.add_argument("--recipients", required=True)
    notify_parser.add_argument("--cause", default=None)
    notify_parser.add_argument("--initiator", default=None, help="Account id to credit.")

    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    if args.command == "check-recipients":
        result = validate_mail_addresses(args.recipients)
        print(f"{result.kind.value.upper()}: {result.message}" if result.message else result.kind.value.upper())
        return 1 if result.kind is ValidationKind.ERROR else 0

    if args.command == "notify":
        try:
            mailer = SmtpMailer.from_settings(settings)
        except ValueError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2

        node = Node(
            name=args.node,
            url=args.url,
            offline_cause=args.cause,
            notify=RecipientsProperty.from_form({RecipientsProperty.FORM_FIELD: args.recipients}),
        )
        initiator = User(id=args.initiator) if args.initiator else None
        notification_for(NodeEvent(args.event), mailer, node, settings.root_url, initiator).send()
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
