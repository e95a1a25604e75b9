"""Port interface for assignment notifications."""

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    @abstractmethod
    async def notify(self, to: str, cc: str | None, subject: str, body: str) -> None:
        """Deliver one message. Raises on delivery failure."""
        ...
