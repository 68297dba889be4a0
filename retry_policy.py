import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

logger = logging.getLogger(__name__)


@dataclass
class RetryContext:
    """Bookkeeping for one execute() call. Discarded when it returns."""

    attempt: int
    delay: float
    last_failure: Optional[BaseException] = None


class BackoffPolicy:
    """
    Retry a fallible async operation with exponential delay.

    The delay starts at initial_delay and doubles after every failed attempt.
    The policy does not decide which errors are transient: callers pass the
    exception classes worth retrying in retry_on, anything else propagates
    on the first occurrence.
    """

    def __init__(self, sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self._sleep = sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[Any]],
        max_attempts: int = 3,
        initial_delay: float = 1.0,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    ) -> Any:
        """
        Run operation until it succeeds or max_attempts is reached.

        Args:
            operation: Zero-argument callable returning an awaitable
            max_attempts: Total number of attempts, including the first
            initial_delay: Seconds to wait after the first failure
            retry_on: Exception classes that are eligible for retry

        Returns:
            The operation's result

        Raises:
            The last failure, unchanged, once attempts are exhausted
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        context = RetryContext(attempt=0, delay=initial_delay)

        while True:
            context.attempt += 1
            try:
                return await operation()
            except retry_on as e:
                context.last_failure = e

                if context.attempt >= max_attempts:
                    logger.error(
                        f"Giving up after {context.attempt} attempts: {e}"
                    )
                    raise

                logger.warning(
                    f"Attempt {context.attempt}/{max_attempts} failed: {e}; "
                    f"retrying in {context.delay}s"
                )
                await self._sleep(context.delay)
                context.delay *= 2
