"""Client-side request rate limiter with per-minute, per-day and spacing limits."""

from __future__ import annotations

import asyncio
import time
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, ClassVar

from models.error_models import AIErrorCode, TranslationError
from models.translation_models import RateLimitStatus
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

__all__: list[str] = ["RateLimiter"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class RateLimiter:
    """Reserve request slots before calling a rate-limited API.

    Slots are reserved under a lock, so concurrent callers are served one at a time.
    The minute window starts at the first request after the previous window expired; the
    daily counter resets when the local date changes.

    Attributes:
        WINDOW_SEC (ClassVar[float]): Length of the per-minute window.
    """

    WINDOW_SEC: ClassVar[float] = 60.0

    def __init__(
        self,
        *,
        requests_per_minute: int,
        requests_per_day: int,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the limiter.

        Args:
            requests_per_minute (int): Requests allowed per window.
            requests_per_day (int): Requests allowed per local day.
            min_interval (float): Minimum spacing between consecutive requests, in seconds.
            clock (Callable[[], float]): Monotonic clock in seconds.
            sleep (Callable[[float], Awaitable[None]]): Coroutine used to wait.
            today (Callable[[], date]): Returns the current local date.
        """
        self.requests_per_minute: int = requests_per_minute
        self.requests_per_day: int = requests_per_day
        self.min_interval: float = min_interval
        self._clock: Callable[[], float] = clock
        self._sleep: Callable[[float], Awaitable[None]] = sleep
        self._today: Callable[[], date] = today

        self._lock: asyncio.Lock = asyncio.Lock()
        self._window_start: float = clock()
        self._window_count: int = 0
        self._day: date = today()
        self._daily_count: int = 0
        self._last_request: float | None = None

    async def acquire(self) -> None:
        """Wait until a request may be sent and count it.

        Raises:
            TranslationError: AI_QUOTA_EXCEEDED when the daily limit is reached.
        """
        async with self._lock:
            self._roll_day()
            if self._daily_count >= self.requests_per_day:
                raise TranslationError(
                    AIErrorCode.QUOTA_EXCEEDED, f"Daily limit of {self.requests_per_day} requests reached"
                )

            self._roll_window()
            if self._window_count >= self.requests_per_minute:
                wait_sec: float = self.WINDOW_SEC - (self._clock() - self._window_start)
                if wait_sec > 0:
                    logger.info("Rate limit reached, waiting %.1f seconds", wait_sec)
                    await self._sleep(wait_sec)
                self._start_window()

            if self._last_request is not None:
                gap: float = self._clock() - self._last_request
                if gap < self.min_interval:
                    await self._sleep(self.min_interval - gap)

            self._last_request = self._clock()
            self._window_count += 1
            self._daily_count += 1

    def status(self) -> RateLimitStatus:
        self._roll_day()
        self._roll_window()
        elapsed: float = self._clock() - self._window_start
        reset_in: float = max(0.0, self.WINDOW_SEC - elapsed)
        return RateLimitStatus(
            remaining=max(0, self.requests_per_minute - self._window_count),
            reset_time=datetime.now().astimezone() + timedelta(seconds=reset_in),
            daily_remaining=max(0, self.requests_per_day - self._daily_count),
        )

    def _roll_window(self) -> None:
        if self._clock() - self._window_start >= self.WINDOW_SEC:
            self._start_window()

    def _start_window(self) -> None:
        self._window_start = self._clock()
        self._window_count = 0

    def _roll_day(self) -> None:
        today: date = self._today()
        if today != self._day:
            self._day = today
            self._daily_count = 0
