from __future__ import annotations

import asyncio
import math
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from clipai import logger as logger_mod

from .errors import ProviderError, RateLimitedError
from .types import RateLimitSignal

log = logger_mod.get_logger()

T = TypeVar("T")

# Case-insensitive substrings that mark a provider error as quota/TPM exhaustion.
RATE_LIMIT_MARKERS = (
    "rate limit",
    "ratelimit",
    "tpm",
    "tokens per minute",
    "quota",
)

_WAIT_RE = re.compile(r"try again in ([\d.]+)s", re.IGNORECASE)


@dataclass(frozen=True)
class RetryConfig:
    """Retry/backoff settings for rate-limited provider calls.

    Notes:
    - `max_retries` counts retries after the first attempt.
    - Provider-advised waits win over the exponential backoff.
    """

    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 60000

    def __post_init__(self) -> None:
        # Clamp instead of raising to keep retry helpers low-friction.
        if self.max_retries < 0:
            object.__setattr__(self, "max_retries", 0)

        if self.base_delay_ms <= 0:
            object.__setattr__(self, "base_delay_ms", 1)

        if self.max_delay_ms < self.base_delay_ms:
            object.__setattr__(self, "max_delay_ms", int(self.base_delay_ms))


def is_rate_limit_message(message: Optional[str]) -> bool:
    msg = (message or "").lower()
    return any(marker in msg for marker in RATE_LIMIT_MARKERS)


def extract_wait_ms(message: Optional[str]) -> Optional[int]:
    """Parse "try again in <seconds>s" into milliseconds, rounded up."""

    match = _WAIT_RE.search(message or "")
    if not match:
        return None
    try:
        seconds = float(match.group(1))
    except ValueError:
        return None
    return math.ceil(seconds * 1000)


def backoff_ms(attempt: int, retry: RetryConfig) -> int:
    return retry.base_delay_ms * (2**attempt)


def rate_limit_signal(
    message: Optional[str], attempt: int, retry: RetryConfig
) -> Optional[RateLimitSignal]:
    """Return a signal for rate-limit messages, None for anything else."""

    if not is_rate_limit_message(message):
        return None
    return RateLimitSignal(
        wait_ms=extract_wait_ms(message),
        retry_eligible=attempt < retry.max_retries,
    )


async def execute_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    context: str,
    retry: RetryConfig | None = None,
    attempt: int = 0,
) -> T:
    """Run a provider call, retrying only on rate-limit errors.

    Attempts are numbered from `attempt`; no retry happens once the counter
    reaches `retry.max_retries`.
    """

    retry = retry or RetryConfig()

    while True:
        try:
            return await fn()
        except RateLimitedError:
            raise
        except ProviderError as e:
            signal = rate_limit_signal(str(e), attempt, retry)
            if signal is None:
                raise

            if not signal.retry_eligible:
                log.error(
                    f"❌ Rate limit while {context}; giving up after "
                    f"{attempt}/{retry.max_retries} retries: {e}"
                )
                raise RateLimitedError(str(e)) from e

            wait_ms = signal.wait_ms or backoff_ms(attempt, retry)
            wait_ms = min(wait_ms, retry.max_delay_ms)
            log.warning(
                f"⚠️ Rate limit while {context}; waiting {wait_ms}ms before "
                f"retry {attempt + 1}/{retry.max_retries}"
            )
            await asyncio.sleep(wait_ms / 1000)
            attempt += 1
