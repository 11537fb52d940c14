import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_MARKERS = ("503", "overloaded")


def is_transient_error(exc: BaseException) -> bool:
    """Provider overload heuristic: the error text mentions 503 or "overloaded"."""
    text = str(exc).lower()
    return any(marker in text for marker in TRANSIENT_MARKERS)


class RetryPolicy:
    """Sequential exponential backoff (base 1.5) for transient failures only.

    At most `max_retries` retries are made; the wait before retry k (1-based)
    is `initial_delay_ms * 1.5 ** k` milliseconds. No jitter.
    """

    def __init__(
        self,
        max_retries: int = 2,
        initial_delay_ms: int = 500,
        is_transient: Callable[[BaseException], bool] = is_transient_error,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.max_retries = max_retries
        self.initial_delay_ms = initial_delay_ms
        self.is_transient = is_transient
        self._sleep = sleep

    def delay_for(self, retry: int) -> float:
        """Backoff in seconds before the given 1-based retry."""
        return self.initial_delay_ms * (1.5 ** retry) / 1000.0

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        retries = 0
        while True:
            try:
                return await operation()
            except Exception as e:
                if not self.is_transient(e) or retries >= self.max_retries:
                    raise
                retries += 1
                delay = self.delay_for(retries)
                logger.warning(f"Transient provider failure, retry {retries}/{self.max_retries} in {delay:.2f}s: {e}")
                await self._sleep(delay)
