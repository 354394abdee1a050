# ============================================================================
# src/idp_extraction/gemini/retry.py
# ============================================================================
"""
Retry / backoff policy for remote calls.

Exponential backoff without jitter: with the defaults the waits between
attempts are 0.5s then 1.0s.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    initial_delay: float = 0.5  # seconds
    backoff_factor: float = 2.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.initial_delay < 0:
            raise ValueError("initial_delay must be >= 0")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be >= 1")

    def first_state(self) -> "RetryState":
        return RetryState(attempt=1, delay=self.initial_delay)


@dataclass(frozen=True)
class RetryState:
    attempt: int
    delay: float

    def advance(self, policy: RetryPolicy) -> "RetryState":
        return RetryState(attempt=self.attempt + 1, delay=self.delay * policy.backoff_factor)

    def is_last(self, policy: RetryPolicy) -> bool:
        return self.attempt >= policy.max_attempts
