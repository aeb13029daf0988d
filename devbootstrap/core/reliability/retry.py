"""
Retry — bounded, fixed-delay retries for transient command failures.

Network downloads (signing keys, installer scripts, SDK archives) are
wrapped in ``retry``.  Only ``CommandError`` is considered transient;
anything else propagates immediately.  After the last attempt the last
``CommandError`` propagates and the run fails fast.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from devbootstrap.core.errors import CommandError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry(
    func: Callable[..., T],
    *args: Any,
    attempts: int = 3,
    delay: float = 2.0,
    description: str = "",
    sleep: Callable[[float], None] = time.sleep,
    **kwargs: Any,
) -> T:
    """Call ``func(*args, **kwargs)`` until it succeeds.

    Args:
        func: Callable to invoke.
        attempts: Total number of attempts (>= 1).
        delay: Fixed delay between attempts, in seconds.
        description: Label for the log line; defaults to the failing command.
        sleep: Injected for tests.

    Returns:
        Whatever ``func`` returns on the first successful attempt.

    Raises:
        CommandError: The error of the last attempt.
    """
    attempts = max(1, attempts)
    n = 0
    while True:
        try:
            return func(*args, **kwargs)
        except CommandError as e:
            n += 1
            if n >= attempts:
                raise
            logger.warning(
                "retry %d/%d: %s (waiting %gs)",
                n,
                attempts,
                description or e.command,
                delay,
            )
            sleep(delay)


@dataclass
class RetryPolicy:
    """Attempt count and delay resolved from settings."""

    attempts: int = 3
    delay: float = 2.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __call__(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        return retry(
            func,
            *args,
            attempts=self.attempts,
            delay=self.delay,
            sleep=self.sleep,
            **kwargs,
        )
