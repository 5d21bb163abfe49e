"""Retry policy for rate-limited API requests."""

import logging
from typing import Optional, Tuple
from custom_workflow.shared.constants import (
    MAX_RETRY_ATTEMPTS,
    INITIAL_RETRY_DELAY_SECONDS,
    MAX_RETRY_DELAY_SECONDS,
)


class RetryHandler:
    """Decides when to retry a rate-limited request and calculates backoff delays"""

    def __init__(
        self,
        max_attempts: int = MAX_RETRY_ATTEMPTS,
        initial_delay: float = INITIAL_RETRY_DELAY_SECONDS,
        max_delay: float = MAX_RETRY_DELAY_SECONDS,
    ):
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.max_delay = max_delay

    def should_retry(
        self,
        attempt: int,
        retry_after: Optional[str] = None,
        url: str = "",
    ) -> Tuple[bool, Optional[float]]:
        """Checks if a request should be retried after ``attempt`` retries already ran"""
        if attempt >= self.max_attempts:
            logging.warning(
                "Maximum retry attempts reached",
                extra={
                    "url": url,
                    "retry_count": attempt,
                    "max_attempts": self.max_attempts
                }
            )
            return False, None

        delay = self._calculate_backoff_delay(attempt, parse_retry_after(retry_after))

        logging.info(
            "Rate limited request will be retried",
            extra={
                "url": url,
                "retry_attempt": attempt + 1,
                "delay_seconds": delay
            }
        )

        return True, delay

    def _calculate_backoff_delay(self, attempt: int, retry_after: Optional[int]) -> float:
        """Exponential backoff with Retry-After header support"""
        if retry_after:
            # Honor Retry-After header from 429 responses
            delay = min(retry_after, self.max_delay)
            logging.debug(
                f"Using Retry-After header delay: {delay}s",
                extra={"retry_after": retry_after}
            )
        else:
            # Exponential backoff: 1s, 2s, 4s, 8s, ...
            delay = min(self.initial_delay * (2 ** attempt), self.max_delay)
            logging.debug(
                f"Using exponential backoff delay: {delay}s",
                extra={"retry_count": attempt}
            )

        return delay


def parse_retry_after(header: Optional[str]) -> Optional[int]:
    """Only the delay-seconds form of Retry-After is honored"""
    if header and header.strip().isdigit():
        return int(header.strip())
    return None
