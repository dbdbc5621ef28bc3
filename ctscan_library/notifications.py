"""User-facing notifications emitted by mutations.

Each mutation outcome produces one Notification. Consumers either
subscribe a queue (async consumption) or register a listener callback
(synchronous rendering, e.g. the CLI).
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Literal

from pydantic import BaseModel
from pydantic import Field

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    """Success or failure message for the end user."""

    level: Literal["success", "error"]
    message: str
    mutation: str | None = Field(None, description="Mutation that produced this notification")
    timestamp: datetime = Field(default_factory=datetime.now)


Listener = Callable[[Notification], None]


class NotificationEmitter:
    """Fan-out of notifications to subscriber queues and listeners.

    Each subscriber gets its own queue so a slow consumer never blocks others.
    """

    def __init__(self) -> None:
        self.queues: list[asyncio.Queue[Notification]] = []
        self.listeners: list[Listener] = []
        self._lock = asyncio.Lock()

    def subscribe(self) -> asyncio.Queue[Notification]:
        """Create new subscriber queue.

        Returns:
            asyncio.Queue that will receive all emitted notifications
        """
        queue: asyncio.Queue[Notification] = asyncio.Queue()
        self.queues.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[Notification]) -> None:
        if queue in self.queues:
            self.queues.remove(queue)

    def add_listener(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    async def emit(self, notification: Notification) -> None:
        """Deliver notification to every queue and listener.

        Args:
            notification: Notification to deliver
        """
        log = logger.info if notification.level == "success" else logger.warning
        log(f"[{notification.mutation}] {notification.message}")

        async with self._lock:
            for queue in self.queues:
                await queue.put(notification)
            for listener in list(self.listeners):
                try:
                    listener(notification)
                except Exception as e:
                    logger.error(f"Notification listener failed: {e}")

    async def success(self, message: str, mutation: str | None = None) -> None:
        await self.emit(Notification(level="success", message=message, mutation=mutation))

    async def error(self, message: str, mutation: str | None = None) -> None:
        await self.emit(Notification(level="error", message=message, mutation=mutation))

    def close(self) -> None:
        self.queues.clear()
        self.listeners.clear()
