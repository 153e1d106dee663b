"""
Stream Outbox
Bounded queue of frames waiting to go out on a live-preview connection.

Only the newest view frame matters to the editor, so a pending view is
replaced rather than queued behind older ones. Other frames (pong, error)
are kept in order up to a fixed limit; the oldest of them are dropped past it.
"""

import asyncio
from collections import deque
from typing import Any

from ..core import get_logger
from ..monitoring import metrics_collector

logger = get_logger(__name__)

Message = dict[str, Any]

DEFAULT_LIMIT = 32
VIEW = "view"


class Outbox:
    """Single-consumer frame queue that collapses view frames."""

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self._frames: deque[Message] = deque()
        self._ready = asyncio.Event()

    def __len__(self) -> int:
        return len(self._frames)

    def put(self, message: Message) -> None:
        """Queue a frame without waiting; holds at most one view plus `limit` others."""
        is_view = message.get("type") == VIEW
        matching = [frame for frame in self._frames if (frame.get("type") == VIEW) == is_view]

        if is_view:
            for frame in matching:
                self._frames.remove(frame)
        elif len(matching) >= self.limit:
            dropped = matching[0]
            self._frames.remove(dropped)
            logger.warning("outbox_frame_dropped", type=dropped.get("type"), limit=self.limit)
            metrics_collector.record_error("OutboxFull", "stream")

        self._frames.append(message)
        self._ready.set()

    async def get(self) -> Message:
        """Wait for and remove the oldest pending frame."""
        while not self._frames:
            self._ready.clear()
            await self._ready.wait()
        return self._frames.popleft()


__all__ = ["Outbox", "DEFAULT_LIMIT"]
