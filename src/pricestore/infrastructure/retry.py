"""Bounded retry for fallible operations such as opening a backend connection.

A single ConnectionRetrier is a reusable policy object: the attempt budget
and the wait strategy are fixed at construction, while the deadline and the
cancellation signal belong to each call.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TypeVar

from tenacity import RetryCallState, Retrying, retry_if_exception_type, wait_fixed
from tenacity.wait import wait_base

from pricestore.domain.exceptions import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryError(StorageError):
    """Retrying stopped for a reason other than the operation's own error."""


class DeadlineExceededError(RetryError):
    """The caller's deadline passed before the operation succeeded."""


class RetryCancelledError(RetryError):
    """The caller cancelled while waiting between attempts."""


class ConnectionEstablishError(StorageError):
    """The backend could not be reached at start-up. Not recoverable."""


class ConnectionRetrier:
    """Retry an operation up to ``max_attempts`` times.

    Waits ``interval`` seconds between attempts unless a different tenacity
    wait strategy is supplied through ``wait`` (e.g. ``wait_exponential``).
    """

    def __init__(
        self,
        max_attempts: int,
        interval: float,
        wait: wait_base | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        if interval < 0:
            raise ValueError(f"interval cannot be negative, got {interval}")
        self.max_attempts = max_attempts
        self.interval = interval
        self._wait = wait if wait is not None else wait_fixed(interval)

    def call(
        self,
        operation: Callable[[], T],
        deadline: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> T:
        """Run ``operation`` until it succeeds or the policy gives up.

        Args:
            operation: Zero-argument callable; any exception counts as a failure.
            deadline: Absolute ``time.monotonic()`` value after which no new
                attempt starts.
            cancel_event: When set during a wait, retrying stops at once.

        Raises:
            The operation's last exception once ``max_attempts`` are used up,
            DeadlineExceededError if the deadline passed first, or
            RetryCancelledError if ``cancel_event`` was set.
        """
        cancel = cancel_event if cancel_event is not None else threading.Event()
        last_error: list[BaseException] = []

        def deadline_passed() -> bool:
            return deadline is not None and time.monotonic() >= deadline

        def stop(retry_state: RetryCallState) -> bool:
            return (
                retry_state.attempt_number >= self.max_attempts
                or deadline_passed()
                or cancel.is_set()
            )

        def before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            last_error[:] = [error]
            logger.warning(
                "Attempt %d/%d failed: %s; retrying in %.2fs",
                retry_state.attempt_number,
                self.max_attempts,
                error,
                retry_state.next_action.sleep if retry_state.next_action else 0.0,
            )

        def sleep(seconds: float) -> None:
            cause = last_error[0] if last_error else None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining < seconds:
                    if cancel.wait(max(remaining, 0.0)):
                        raise RetryCancelledError("retry cancelled") from cause
                    raise DeadlineExceededError(
                        f"deadline exceeded after: {cause}"
                    ) from cause
            if cancel.wait(seconds):
                raise RetryCancelledError("retry cancelled") from cause

        def give_up(retry_state: RetryCallState) -> T:
            error = retry_state.outcome.exception()
            logger.warning(
                "Attempt %d/%d failed: %s; giving up",
                retry_state.attempt_number,
                self.max_attempts,
                error,
            )
            if cancel.is_set():
                raise RetryCancelledError("retry cancelled") from error
            if retry_state.attempt_number < self.max_attempts and deadline_passed():
                raise DeadlineExceededError(f"deadline exceeded after: {error}") from error
            raise error

        retrying = Retrying(
            stop=stop,
            wait=self._wait,
            sleep=sleep,
            retry=retry_if_exception_type(Exception),
            before_sleep=before_sleep,
            retry_error_callback=give_up,
        )
        return retrying(operation)
