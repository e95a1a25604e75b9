"""Tests for SendGridEmailAdapter — uses httpx.MockTransport (no network)."""

import json

import httpx
import pytest

from roleta.adapters.notifications.sendgrid_adapter import SendGridEmailAdapter


def _adapter(handler, api_key="sg-key"):
    return SendGridEmailAdapter(
        api_key=api_key,
        from_email="roleta@example.com",
        from_name="Roleta",
        url="https://mail.test/v3/mail/send",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_notify_posts_payload_with_cc():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["auth"] = request.headers["Authorization"]
        captured["payload"] = json.loads(request.content)
        return httpx.Response(202, headers={"X-Message-Id": "abc"})

    await _adapter(handler).notify("ana@example.com", "gerente@example.com", "Assunto", "Corpo")

    assert captured["auth"] == "Bearer sg-key"
    payload = captured["payload"]
    assert payload["personalizations"] == [{
        "to": [{"email": "ana@example.com"}],
        "cc": [{"email": "gerente@example.com"}],
    }]
    assert payload["from"] == {"email": "roleta@example.com", "name": "Roleta"}
    assert payload["subject"] == "Assunto"
    assert payload["content"] == [{"type": "text/plain", "value": "Corpo"}]


def test_cc_equal_to_recipient_is_dropped():
    adapter = _adapter(lambda r: httpx.Response(202))
    payload = adapter.build_payload("Ana@example.com", "ana@example.com", "s", "b")
    assert "cc" not in payload["personalizations"][0]


@pytest.mark.asyncio
async def test_provider_error_raises():
    adapter = _adapter(lambda r: httpx.Response(401, json={"errors": ["bad key"]}))
    with pytest.raises(httpx.HTTPStatusError):
        await adapter.notify("ana@example.com", None, "s", "b")


@pytest.mark.asyncio
async def test_missing_api_key_raises(monkeypatch):
    from roleta.config import settings

    monkeypatch.setattr(settings, "email_api_key", "")
    adapter = _adapter(lambda r: httpx.Response(202), api_key="")
    with pytest.raises(RuntimeError, match="EMAIL_API_KEY"):
        await adapter.notify("ana@example.com", None, "s", "b")


def test_sender_falls_back_to_manager_address(monkeypatch):
    from roleta.config import settings

    monkeypatch.setattr(settings, "email_from", "")
    monkeypatch.setattr(settings, "email_gerente_cc", "gerente@example.com")
    adapter = SendGridEmailAdapter(api_key="sg-key", url="https://mail.test/v3/mail/send")

    payload = adapter.build_payload("ana@example.com", None, "s", "b")
    assert payload["from"]["email"] == "gerente@example.com"
