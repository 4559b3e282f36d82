"""Exponential backoff retry engine for outbound calls."""

import asyncio
from collections.abc import Awaitable, Callable

import httpx

from harbor.exceptions import HarborError
from harbor.http.models import Response
from harbor.observability.logging import get_logger
from harbor.observability.metrics import SYNC_ATTEMPTS
from harbor.sync.models import AttemptResult, RetryAttempt, RetryOutcome, RetryReport

logger = get_logger(__name__)

Operation = Callable[[], Awaitable[Response]]
Sleep = Callable[[float], Awaitable[None]]


def classify_status(status: int) -> AttemptResult:
    """2xx succeeds, 5xx and 408 are retried, anything else is terminal."""
    if 200 <= status < 300:
        return AttemptResult.SUCCESS
    if status >= 500 or status == 408:
        return AttemptResult.RETRYABLE
    return AttemptResult.TERMINAL


def classify_error(error: BaseException) -> AttemptResult:
    """Timeout, abort and network-class failures are retried."""
    if isinstance(error, HarborError):
        return AttemptResult.RETRYABLE if error.retryable else AttemptResult.TERMINAL
    if isinstance(error, (asyncio.TimeoutError, httpx.TransportError, ConnectionError)):
        return AttemptResult.RETRYABLE
    return AttemptResult.TERMINAL


class RetryEngine:
    """Runs an operation until it succeeds, fails terminally or runs out of attempts.

    After a retryable failure that is not the last attempt the engine sleeps
    ``base_delay * 2**attempt`` seconds, attempts counting from 1. With the
    default base of one second, three attempts sleep 2s then 4s.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        return self._base_delay * (2**attempt)

    async def run(self, operation: Operation, max_attempts: int | None = None) -> RetryReport:
        """Run operation with retries, recording every attempt.

        Never raises; cancellation still propagates.
        """
        limit = max_attempts if max_attempts is not None else self._max_attempts
        attempts: list[RetryAttempt] = []

        for attempt in range(1, limit + 1):
            status: int | None = None
            error: str | None = None
            try:
                response = await operation()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                result = classify_error(e)
                error = str(e) or type(e).__name__
            else:
                status = response.status
                result = classify_status(status)
                if result != AttemptResult.SUCCESS:
                    error = f"HTTP {status}"

            SYNC_ATTEMPTS.labels(result=result.value).inc()

            if result == AttemptResult.SUCCESS:
                attempts.append(RetryAttempt(attempt=attempt, result=result, status=status))
                return RetryReport(outcome=RetryOutcome.SUCCESS, attempts=attempts)

            if result == AttemptResult.TERMINAL:
                attempts.append(
                    RetryAttempt(attempt=attempt, result=result, status=status, error=error)
                )
                logger.warning(
                    "retry_terminal_failure",
                    attempt=attempt,
                    status=status,
                    error=error,
                )
                return RetryReport(outcome=RetryOutcome.TERMINAL, attempts=attempts)

            delay = self.delay_for(attempt) if attempt < limit else None
            attempts.append(
                RetryAttempt(
                    attempt=attempt,
                    result=result,
                    status=status,
                    error=error,
                    delay_seconds=delay,
                )
            )
            logger.warning(
                "retry_attempt_failed",
                attempt=attempt,
                max_attempts=limit,
                status=status,
                error=error,
                delay_seconds=delay,
            )
            if delay is not None:
                await self._sleep(delay)

        logger.error("retry_exhausted", attempts=limit)
        return RetryReport(outcome=RetryOutcome.EXHAUSTED, attempts=attempts)

    async def retry(self, operation: Operation, max_attempts: int | None = None) -> bool:
        """Run operation with retries and report only whether it succeeded."""
        report = await self.run(operation, max_attempts)
        return report.succeeded
