"""Tests for identities and the recipients property."""

import pytest
from pydantic import ValidationError

from node_notifier.models import Identity, RecipientsProperty, User
from node_notifier.notifications.validation import ValidationKind


class TestUser:
    def test_user_is_an_identity(self):
        assert isinstance(User(id="alice"), Identity)

    def test_user_is_immutable(self):
        user = User(id="alice")
        with pytest.raises(ValidationError):
            user.id = "mallory"


class TestRecipientsProperty:
    def test_from_form(self):
        prop = RecipientsProperty.from_form({"emailRecipients": "ops@example.org"})
        assert prop == RecipientsProperty(email_recipients="ops@example.org")

    def test_empty_form_value_removes_property(self):
        assert RecipientsProperty.from_form({"emailRecipients": ""}) is None

    def test_missing_form_field_is_an_error(self):
        with pytest.raises(KeyError):
            RecipientsProperty.from_form({})

    def test_check_email_recipients(self):
        assert RecipientsProperty.check_email_recipients("ops@example.org").is_ok
        assert RecipientsProperty.check_email_recipients("").kind is ValidationKind.WARNING
        assert RecipientsProperty.check_email_recipients("ops").kind is ValidationKind.ERROR

    def test_display_name(self):
        assert RecipientsProperty.DISPLAY_NAME == "Notify when node online status changes"

    @pytest.mark.parametrize("value", ["a@", '"', "<"])
    def test_check_email_recipients_reports_parse_errors(self, value):
        result = RecipientsProperty.check_email_recipients(value)
        assert result.kind is ValidationKind.ERROR
        assert result.message.startswith("Invalid address provided: ")
