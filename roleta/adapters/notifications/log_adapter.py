"""Log-only notifier — used when no email provider is configured."""

from __future__ import annotations

import logging

from roleta.application.ports.notifier_port import NotifierPort

logger = logging.getLogger(__name__)


class LogNotifierAdapter(NotifierPort):
    async def notify(self, to: str, cc: str | None, subject: str, body: str) -> None:
        logger.info("Email (not sent, no provider) to=%s cc=%s subject=%s", to, cc, subject)
        logger.debug("Email body:\n%s", body)
