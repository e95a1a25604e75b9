"""SendGrid email adapter — implements NotifierPort over the v3 mail-send API."""

from __future__ import annotations

import logging

import httpx

from roleta.application.ports.notifier_port import NotifierPort
from roleta.config import settings

logger = logging.getLogger(__name__)


class SendGridEmailAdapter(NotifierPort):
    """Plain-text email through SendGrid (or any v3-compatible endpoint)."""

    def __init__(
        self,
        api_key: str | None = None,
        from_email: str | None = None,
        from_name: str | None = None,
        url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key or settings.email_api_key
        self._from_email = from_email or settings.email_from or settings.email_gerente_cc
        self._from_name = from_name or settings.email_from_name
        self._url = url or settings.email_api_url
        self._transport = transport

    def build_payload(self, to: str, cc: str | None, subject: str, body: str) -> dict:
        personalization: dict = {"to": [{"email": to}]}
        # SendGrid rejects a cc equal to a to address
        if cc and cc.lower() != to.lower():
            personalization["cc"] = [{"email": cc}]
        return {
            "personalizations": [personalization],
            "from": {"email": self._from_email, "name": self._from_name},
            "subject": subject,
            "content": [{"type": "text/plain", "value": body}],
        }

    async def notify(self, to: str, cc: str | None, subject: str, body: str) -> None:
        if not self._api_key:
            raise RuntimeError("EMAIL_API_KEY is not set")

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(transport=self._transport, timeout=10.0) as client:
            response = await client.post(
                self._url, json=self.build_payload(to, cc, subject, body), headers=headers
            )
            response.raise_for_status()

        logger.info(
            "SendGrid accepted email to %s (message id: %s)",
            to, response.headers.get("X-Message-Id"),
        )
