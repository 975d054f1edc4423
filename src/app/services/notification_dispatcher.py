from abc import ABC, abstractmethod


class INotificationDispatcher(ABC):
    """Outbound transactional email transport"""

    @abstractmethod
    async def send(self, to: str, subject: str, html: str) -> None:
        """Attempt delivery once; raises on transport failure"""
        pass
