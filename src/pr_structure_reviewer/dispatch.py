"""
Review Dispatcher

Runs review jobs off the request path with retry and exponential backoff.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


class ReviewDispatcher:
    """
    Background job runner with at-least-once retries.

    Backoff: initial * multiplier^(attempt-1), capped at max_backoff.
    A job is attempted at most ``max_retries + 1`` times; the last error is
    set on the returned future.
    """

    def __init__(
        self,
        max_workers: int = 4,
        max_retries: int = 3,
        initial_backoff: float = 2.0,
        max_backoff: float = 60.0,
        multiplier: float = 2.0,
        inline: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize dispatcher.

        Args:
            max_workers: Worker thread count
            max_retries: Retries after the first failed attempt
            initial_backoff: Delay before the first retry (seconds)
            max_backoff: Delay cap (seconds)
            multiplier: Backoff growth factor
            inline: Run jobs on the calling thread
            sleep: Sleep function used between attempts
        """
        self.max_retries = max_retries
        self.initial_backoff = initial_backoff
        self.max_backoff = max_backoff
        self.multiplier = multiplier
        self.inline = inline
        self._sleep = sleep
        self._executor = None if inline else ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="review-worker"
        )

    @classmethod
    def from_config(cls, config) -> "ReviewDispatcher":
        """Build from a DispatchConfig."""
        return cls(
            max_workers=config.max_workers,
            max_retries=config.max_retries,
            initial_backoff=config.initial_backoff,
            max_backoff=config.max_backoff,
            multiplier=config.multiplier,
            inline=config.inline,
        )

    def calculate_backoff(self, attempt: int) -> float:
        """Delay after failed attempt number ``attempt`` (1-based)."""
        backoff = self.initial_backoff * (self.multiplier ** (attempt - 1))
        return min(backoff, self.max_backoff)

    def submit(self, task_key: str, fn: Callable[..., Any], *args, **kwargs) -> Future:
        """
        Schedule a job.

        Args:
            task_key: Label used in logs (e.g. owner/repo#42)
            fn: Job callable
            *args, **kwargs: Job arguments

        Returns:
            Future resolving to the job's return value
        """
        logger.info(f"Queued review job {task_key}")

        if self._executor is not None:
            return self._executor.submit(self._run_with_retry, task_key, fn, *args, **kwargs)

        future: Future = Future()
        try:
            future.set_result(self._run_with_retry(task_key, fn, *args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def _run_with_retry(self, task_key: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
        attempt = 1
        while True:
            try:
                result = fn(*args, **kwargs)
                logger.info(f"Review job {task_key} finished (attempt {attempt})")
                return result
            except Exception as e:
                if attempt > self.max_retries:
                    logger.error(f"Review job {task_key} failed after {attempt} attempts: {e}")
                    raise

                delay = self.calculate_backoff(attempt)
                logger.warning(f"Review job {task_key} failed (attempt {attempt}): {e}; retrying in {delay:.1f}s")
                self._sleep(delay)
                attempt += 1

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
