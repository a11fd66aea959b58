from __future__ import annotations

from types import SimpleNamespace

import httpx
import pytest

from compliance_notifier.infrastructure import sms as sms_module


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("021 555 0100", "+64215550100"),
        ("(09) 555-0100", "+6495550100"),
        ("+64 21 555 0100", "+64215550100"),
        ("215550100", "+64215550100"),
    ],
)
def test_format_nz_phone_number(raw, expected):
    assert sms_module.format_nz_phone_number(raw) == expected


def test_format_rejects_empty_number():
    with pytest.raises(ValueError):
        sms_module.format_nz_phone_number("  ")


def _configure(monkeypatch, **overrides):
    values = {
        "twilio_account_sid": "AC123",
        "twilio_auth_token": "secret",
        "twilio_phone_number": "+6498880000",
        "twilio_timeout_seconds": 5.0,
    }
    values.update(overrides)
    monkeypatch.setattr(sms_module, "get_settings", lambda: SimpleNamespace(**values))


def test_send_sms_without_credentials_is_mocked(monkeypatch, caplog):
    _configure(monkeypatch, twilio_account_sid=None)

    with caplog.at_level("INFO"):
        result = sms_module.send_sms("021 555 0100", "hello")

    assert result.success is True
    assert result.message_id.startswith("mock-")
    assert "[SMS mock]" in caplog.text


def test_send_sms_posts_to_twilio(monkeypatch):
    _configure(monkeypatch)
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["body"] = request.content.decode()
        return httpx.Response(201, json={"sid": "SM42"})

    client = httpx.Client(transport=httpx.MockTransport(handler))

    result = sms_module.send_sms("021 555 0100", "Renew now", client=client)

    assert result.success is True
    assert result.message_id == "SM42"
    assert captured["url"].endswith("/Accounts/AC123/Messages.json")
    assert "To=%2B64215550100" in captured["body"]


def test_send_sms_reports_twilio_error(monkeypatch):
    _configure(monkeypatch)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Invalid To", "code": 21211})

    client = httpx.Client(transport=httpx.MockTransport(handler))

    result = sms_module.send_sms("021 555 0100", "Renew now", client=client)

    assert result.success is False
    assert result.error == "Invalid To (code 21211)"
