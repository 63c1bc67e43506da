"""
rankbot/utils/retry.py
Bounded retry with a fixed cooldown after rate-limit signals.

One RetryPolicy guards one logical endpoint ("Account age", "Set group
member role"). Callers pass the operation and a classifier that maps each
failure onto a RetryOutcome; the policy owns the attempt counter and the
sleeping.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TypeVar

from rich.console import Console
from rich.markup import escape

from rankbot.errors import EndpointExceededRetryLimit

console = Console()

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5
TOO_MANY_REQUESTS_COOLDOWN = 60.0  # seconds


class RetryOutcome(Enum):
    RETRY = "retry"          # try again right away
    COOLDOWN = "cooldown"    # sleep the cooldown, then try again
    RESOLVED = "resolved"    # the failure actually means success
    FATAL = "fatal"          # re-raise immediately, budget ignored


@dataclass
class RetryStats:
    """Accumulated retry statistics, shared across policies for the run summary."""
    retries: int = 0
    cooldown_waits: int = 0
    total_wait_seconds: float = 0.0


class RetryPolicy:
    """
    Runs an operation up to `max_attempts` times.

    Every failed attempt uses one attempt from the budget, including
    rate-limited ones. The cooldown is slept only while attempts remain;
    once the budget is gone the policy raises
    EndpointExceededRetryLimit(endpoint) chained to the last error.
    """

    def __init__(self, endpoint: str, max_attempts: int = DEFAULT_MAX_ATTEMPTS,
                 cooldown: float = TOO_MANY_REQUESTS_COOLDOWN,
                 sleep: Callable[[float], None] = time.sleep,
                 stats: Optional[RetryStats] = None, verbose: bool = False):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.endpoint = endpoint
        self.max_attempts = max_attempts
        self.cooldown = cooldown
        self.stats = stats if stats is not None else RetryStats()
        self.verbose = verbose
        self._sleep = sleep

    def run(self, operation: Callable[[], T],
            classify: Callable[[Exception], RetryOutcome]) -> Optional[T]:
        attempts_remaining = self.max_attempts

        while True:
            try:
                return operation()
            except Exception as e:
                outcome = classify(e)
                if outcome is RetryOutcome.RESOLVED:
                    return None
                if outcome is RetryOutcome.FATAL:
                    raise

                attempts_remaining -= 1
                if attempts_remaining == 0:
                    raise EndpointExceededRetryLimit(self.endpoint) from e

                self.stats.retries += 1
                if outcome is RetryOutcome.COOLDOWN:
                    self._wait(self.cooldown, e)
                elif self.verbose:
                    console.print(
                        f"  [yellow]⚠ {self.endpoint}: {escape(str(e))}, retrying "
                        f"({attempts_remaining} attempt(s) left)[/yellow]"
                    )

    def _wait(self, seconds: float, reason: Exception):
        self.stats.cooldown_waits += 1
        self.stats.total_wait_seconds += seconds
        if self.verbose:
            console.print(
                f"  [dim yellow]⏳ {self.endpoint}: {escape(str(reason))}, waiting {seconds:.0f}s[/dim yellow]"
            )
        self._sleep(seconds)
