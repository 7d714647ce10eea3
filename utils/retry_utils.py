from __future__ import annotations

import random
from typing import Final

from models.error_models import AIErrorCode, TranslationError

__all__: list[str] = ["RetryUtils"]

RETRYABLE_CODES: Final[frozenset[AIErrorCode]] = frozenset(
    {
        AIErrorCode.NETWORK_ERROR,
        AIErrorCode.TIMEOUT,
        AIErrorCode.SERVICE_UNAVAILABLE,
        AIErrorCode.RATE_LIMIT_EXCEEDED,
    }
)


class RetryUtils:
    """Retry classification and exponential backoff helpers."""

    @staticmethod
    def is_retryable(err: BaseException) -> bool:
        """Check whether an error is worth retrying.

        A ``TRANSLATION_FAILED`` error is judged by the error it was raised from, so a request
        that exhausted the client's own attempts on a transient failure can be rescheduled later.

        Args:
            err (BaseException): The error to classify.

        Returns:
            bool: True for transient AI service errors, False otherwise.
        """
        if not isinstance(err, TranslationError):
            return False
        if err.code == AIErrorCode.TRANSLATION_FAILED and isinstance(err.__cause__, TranslationError):
            return RetryUtils.is_retryable(err.__cause__)
        return err.code in RETRYABLE_CODES

    @staticmethod
    def compute_delay(
        attempt: int,
        *,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        jitter_factor: float = 0.1,
    ) -> float:
        """Compute the backoff delay before the next attempt.

        ``min(max_delay, base_delay * 2 ** (attempt - 1))`` plus a random jitter of up to
        ``jitter_factor`` of that value.

        Args:
            attempt (int): 1-based number of the attempt that just failed.
            base_delay (float): Delay after the first failure, in seconds.
            max_delay (float): Upper bound for the exponential part, in seconds.
            jitter_factor (float): Maximum jitter as a fraction of the delay.

        Returns:
            float: Delay in seconds.
        """
        exponent: int = max(attempt, 1) - 1
        delay: float = min(max_delay, base_delay * (2**exponent))
        jitter: float = delay * jitter_factor * random.random()  # noqa: S311
        return delay + jitter
