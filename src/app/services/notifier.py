"""
Best-effort notification side channel.

Use cases hand an email to the notifier and carry on; delivery runs on a
scheduler supplied by the caller (FastAPI BackgroundTasks in the API layer)
and its outcome never reaches the primary response.
"""

import logging
from typing import Any, Callable

from src.app.services.notification_dispatcher import INotificationDispatcher

logger = logging.getLogger(__name__)

Scheduler = Callable[..., Any]


class BestEffortNotifier:
    def __init__(self, dispatcher: INotificationDispatcher, schedule: Scheduler):
        self.dispatcher = dispatcher
        self.schedule = schedule

    def notify(self, to: str, subject: str, html: str) -> None:
        """Queue a single delivery attempt; returns before the outcome is known"""
        self.schedule(self.deliver, to, subject, html)

    async def deliver(self, to: str, subject: str, html: str) -> bool:
        try:
            await self.dispatcher.send(to, subject, html)
        except Exception:
            logger.exception("Failed to send email %r to %s", subject, to)
            return False
        logger.info("Sent email %r to %s", subject, to)
        return True
