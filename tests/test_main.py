"""Tests for the command-line entrypoint."""

from unittest import mock

import pytest

from node_notifier import main as cli
from node_notifier.config import Settings


@pytest.fixture(autouse=True)
def _settings(monkeypatch):
    settings = Settings(
        smtp_host="smtp.test",
        mail_from="ci@example.org",
        smtp_use_tls=False,
        root_url="https://ci.example.org/",
    )
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    # Leave structlog unconfigured so other tests can still capture logs.
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)
    return settings


class TestCheckRecipients:
    def test_ok(self, capsys):
        assert cli.main(["check-recipients", "a@example.org"]) == 0
        assert capsys.readouterr().out.strip() == "OK"

    def test_warning_still_succeeds(self, capsys):
        assert cli.main(["check-recipients", ""]) == 0
        assert capsys.readouterr().out.strip() == "WARNING: Empty address list provided"

    def test_error(self, capsys):
        assert cli.main(["check-recipients", "a@example.org, bad"]) == 1
        assert "does not look like an email address" in capsys.readouterr().out


    def test_truncated_input_is_an_error(self, capsys):
        assert cli.main(["check-recipients", "a@"]) == 1
        assert capsys.readouterr().out.startswith("ERROR: Invalid address provided: ")


class TestNotify:
    def test_sends_offline_mail(self):
        with mock.patch("smtplib.SMTP") as smtp_mock:
            code = cli.main([
                "notify", "--node", "agent-1", "--url", "computer/agent-1/",
                "--recipients", "ops@example.org", "--initiator", "alice",
            ])
        assert code == 0
        message = smtp_mock.return_value.__enter__.return_value.send_message.call_args[0][0]
        assert message["Subject"] == "node-offline-plugin: agent-1 went offline"
        assert "Url: https://ci.example.org/computer/agent-1/\nInitiator: alice\n" in message.get_content()

    def test_empty_recipients_send_nothing(self):
        with mock.patch("smtplib.SMTP") as smtp_mock:
            assert cli.main(["notify", "--node", "agent-1", "--recipients", ""]) == 0
        assert not smtp_mock.called

    def test_missing_smtp_config(self, monkeypatch, capsys):
        monkeypatch.setattr(cli, "get_settings", lambda: Settings(smtp_host="", mail_from=""))
        assert cli.main(["notify", "--node", "agent-1", "--recipients", "a@b.com"]) == 2
        assert "SMTP_HOST" in capsys.readouterr().err

    def test_no_command_prints_help(self):
        assert cli.main([]) == 1
