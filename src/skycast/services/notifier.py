"""Auto-dismissing notices."""

import asyncio
from typing import Callable

from loguru import logger

from ..core.config import settings
from ..models.dashboard import Notice


class NoticeTimer:
    """Schedules the dismissal of the notice currently on screen.

    Only one dismissal is ever pending: showing a new notice cancels the previous
    timer and starts a fresh one. Dismissal is cosmetic and never touches
    pipeline state beyond the notice slot.

    Example:
        >>> async def example():
        ...     timer = NoticeTimer(lambda notice: print("dismissed", notice.message), ttl=4.0)
        ...     timer.schedule(Notice(kind="error", message="City not found"))
    """

    def __init__(self, on_dismiss: Callable[[Notice], None], ttl: float | None = None):
        self._on_dismiss = on_dismiss
        self._ttl = ttl if ttl is not None else settings.NOTICE_TTL
        self._handle: asyncio.TimerHandle | None = None
        self._notice: Notice | None = None

    @property
    def pending(self) -> Notice | None:
        """Notice awaiting dismissal, if any."""
        return self._notice

    def schedule(self, notice: Notice) -> None:
        """Start (or restart) the dismissal countdown for ``notice``.

        Must be called from within a running event loop.
        """
        self.cancel()
        loop = asyncio.get_running_loop()
        self._notice = notice
        self._handle = loop.call_later(self._ttl, self._fire, notice)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._notice = None

    def _fire(self, notice: Notice) -> None:
        self._handle = None
        self._notice = None
        logger.debug("Notice dismissed", kind=notice.kind)
        self._on_dismiss(notice)
