from abc import ABC, abstractmethod


class NotificationSink(ABC):
    """Outbound email channel for confirmation and reset messages"""

    @abstractmethod
    async def send(self, to_email: str, subject: str, html_content: str) -> bool:
        """Deliver a message. Returns True if the provider accepted it."""
        pass
