"""
Retry policies.

A retry policy is consulted by the HTTP client each time an attempt fails and
decides whether the request is sent again and after what delay. The
transport itself never retries.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import HTTPStatusError, NetworkError
from .http_client import Failure, HTTPRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryDecision:
    """Outcome of a retry policy: resend after ``delay`` seconds, or give up."""

    retry: bool
    delay: float = 0.0

    @classmethod
    def retry_after(cls, delay: float = 0.0) -> "RetryDecision":
        return cls(retry=True, delay=max(delay, 0.0))

    @classmethod
    def give_up(cls) -> "RetryDecision":
        return cls(retry=False)


class RetryPolicy(ABC):
    """Capability: decide whether a failed attempt should be resent."""

    @abstractmethod
    async def should_retry(
        self, request: HTTPRequest, failure: Failure, attempt: int
    ) -> RetryDecision:
        """
        Decide what to do after a failed attempt.

        Args:
            request: The request as it was sent (after adaptation)
            failure: NetworkError, or HTTPStatusError for an unacceptable status
            attempt: Zero-based number of the attempt that failed

        Returns:
            RetryDecision
        """


class RetryConfig(BaseModel):
    """Configuration for exponential backoff retries."""

    max_retries: int = Field(default=3, ge=0, description="Maximum retry attempts")
    base_delay: float = Field(default=1.0, ge=0.0, description="Initial retry delay in seconds")
    max_delay: float = Field(default=60.0, ge=0.0, description="Maximum retry delay in seconds")
    backoff_factor: float = Field(default=2.0, ge=1.0, description="Exponential backoff base")
    jitter: bool = Field(default=True, description="Add random jitter to delays")
    jitter_factor: float = Field(default=0.1, ge=0.0, le=1.0, description="Jitter as a fraction of the delay")
    retry_on_network_errors: bool = Field(default=True, description="Retry when no response was received")
    retry_on_status_codes: Set[int] = Field(
        default_factory=lambda: {408, 429, 500, 502, 503, 504},
        description="HTTP status codes to retry on",
    )

    model_config = ConfigDict(frozen=True)


class ExponentialBackoffRetryPolicy(RetryPolicy):
    """
    Retries network failures and selected status codes with exponential backoff.

    A numeric ``Retry-After`` header on 429 and 503 responses takes precedence
    over the computed delay, capped at ``max_delay``.

    Example:
        ```python
        policy = ExponentialBackoffRetryPolicy(
            RetryConfig(max_retries=5, base_delay=0.5, retry_on_status_codes={503})
        )
        ```
    """

    def __init__(self, config: Optional[RetryConfig] = None):
        self.config = config or RetryConfig()

    async def should_retry(
        self, request: HTTPRequest, failure: Failure, attempt: int
    ) -> RetryDecision:
        if attempt >= self.config.max_retries:
            return RetryDecision.give_up()

        if isinstance(failure, HTTPStatusError):
            status = failure.status_code
            if status not in self.config.retry_on_status_codes:
                return RetryDecision.give_up()
            retry_after = self._retry_after(failure)
            if retry_after is not None:
                return RetryDecision.retry_after(min(retry_after, self.config.max_delay))
        elif isinstance(failure, NetworkError):
            if not self.config.retry_on_network_errors:
                return RetryDecision.give_up()
        else:
            return RetryDecision.give_up()

        return RetryDecision.retry_after(self.calculate_delay(attempt))

    def calculate_delay(self, attempt: int) -> float:
        """Backoff delay before the retry following ``attempt``."""
        delay = self.config.base_delay * (self.config.backoff_factor ** attempt)
        delay = min(delay, self.config.max_delay)

        if self.config.jitter and delay > 0:
            spread = delay * self.config.jitter_factor
            delay += random.uniform(-spread, spread)

        return max(delay, 0.0)

    @staticmethod
    def _retry_after(failure: HTTPStatusError) -> Optional[float]:
        if failure.status_code not in (429, 503):
            return None

        value = failure.response.headers.get("Retry-After")
        if not value:
            return None
        try:
            return float(value)
        except ValueError:
            # HTTP-date form is not supported
            logger.debug("Ignoring non-numeric Retry-After header: %s", value)
            return None
