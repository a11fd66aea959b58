from __future__ import annotations

from types import SimpleNamespace

import pytest

from compliance_notifier.infrastructure import email as email_module


def _settings(**overrides):
    values = {
        "sendgrid_api_key": "SG.test",
        "sendgrid_sender": "noreply@ranz.test",
        "app_base_url": "https://portal.ranz.test/",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class _FakeClient:
    response = None
    error = None
    sent: list = []

    def __init__(self, api_key):
        self.api_key = api_key

    def send(self, message):
        type(self).sent.append(message)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def sendgrid(monkeypatch):
    client = type("Client", (_FakeClient,), {"sent": []})
    monkeypatch.setattr(email_module, "SendGridAPIClient", client)
    monkeypatch.setattr(email_module, "get_settings", lambda: _settings())
    return client


def test_send_email_without_configuration(monkeypatch):
    monkeypatch.setattr(
        email_module,
        "get_settings",
        lambda: _settings(sendgrid_api_key=None, sendgrid_sender=None),
    )

    result = email_module.send_email("Subject", "<p>Body</p>", "aroha@summit.test")

    assert result.success is False
    assert result.error == "Email delivery is not configured"


def test_send_email_returns_message_id(sendgrid):
    sendgrid.response = SimpleNamespace(
        status_code=202, headers={"X-Message-Id": "abc123"}, body=""
    )

    result = email_module.send_email("Subject", "<p>Body</p>", "aroha@summit.test")

    assert result.success is True
    assert result.id == "abc123"
    assert len(sendgrid.sent) == 1


def test_send_email_reports_api_error(sendgrid):
    error = Exception("Forbidden")
    error.status_code = 403
    error.body = b'{"errors": [{"message": "access forbidden", "field": "from"}]}'
    sendgrid.error = error

    result = email_module.send_email("Subject", "<p>Body</p>", "aroha@summit.test")

    assert result.success is False
    assert result.error == "SendGrid error 403: from: access forbidden"


def test_send_email_rejects_unexpected_status(sendgrid):
    sendgrid.response = SimpleNamespace(status_code=500, headers={}, body="server error")

    result = email_module.send_email("Subject", "<p>Body</p>", "aroha@summit.test")

    assert result.error == "SendGrid responded with status 500: server error"


def test_render_escapes_content_and_links_preferences(monkeypatch):
    monkeypatch.setattr(email_module, "get_settings", lambda: _settings())

    html = email_module.render_notification_email(
        "Audit <Scheduled>", "Bring the H&S plan", "https://portal.ranz.test/audits"
    )

    assert "Audit &lt;Scheduled&gt;" in html
    assert "Bring the H&amp;S plan" in html
    assert "View Details" in html
    assert 'href="https://portal.ranz.test/settings/notifications"' in html


def test_render_without_action_has_no_button(monkeypatch):
    monkeypatch.setattr(email_module, "get_settings", lambda: _settings())

    html = email_module.render_notification_email("Title", "Message")

    assert "View Details" not in html
