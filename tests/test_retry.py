"""
Tests for retry policies.
"""

import pytest

from graphql_transport import (
    ExponentialBackoffRetryPolicy,
    HTTPRequest,
    HTTPResponse,
    HTTPStatusError,
    NetworkError,
    RetryConfig,
    RetryDecision,
    TimeoutError,
)

URL = "https://api.example.com/graphql"
REQUEST = HTTPRequest(method="POST", url=URL, body=b"{}")


def status_failure(status, headers=None):
    return HTTPStatusError(HTTPResponse(status=status, url=URL, headers=headers or {}))


@pytest.fixture
def policy():
    return ExponentialBackoffRetryPolicy(
        RetryConfig(max_retries=3, base_delay=1.0, max_delay=10.0, jitter=False)
    )


class TestRetryDecision:
    """Test retry decision constructors."""

    def test_retry_after(self):
        decision = RetryDecision.retry_after(2.5)
        assert decision.retry is True
        assert decision.delay == 2.5

    def test_negative_delay_is_clamped(self):
        assert RetryDecision.retry_after(-1).delay == 0.0

    def test_give_up(self):
        assert RetryDecision.give_up().retry is False


class TestExponentialBackoffRetryPolicy:
    """Test exponential backoff decisions."""

    @pytest.mark.asyncio
    async def test_retries_network_errors_with_backoff(self, policy):
        failure = NetworkError("connection reset", url=URL)

        delays = [(await policy.should_retry(REQUEST, failure, attempt)).delay for attempt in range(3)]

        assert delays == [1.0, 2.0, 4.0]

    @pytest.mark.asyncio
    async def test_retries_timeouts(self, policy):
        decision = await policy.should_retry(REQUEST, TimeoutError("slow", url=URL), 0)
        assert decision.retry is True

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, policy):
        decision = await policy.should_retry(REQUEST, NetworkError("down"), 3)
        assert decision == RetryDecision.give_up()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [408, 429, 500, 502, 503, 504])
    async def test_retries_transient_statuses(self, policy, status):
        decision = await policy.should_retry(REQUEST, status_failure(status), 0)
        assert decision.retry is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422, 501])
    async def test_does_not_retry_client_errors(self, policy, status):
        decision = await policy.should_retry(REQUEST, status_failure(status), 0)
        assert decision.retry is False

    @pytest.mark.asyncio
    async def test_honours_retry_after(self, policy):
        failure = status_failure(429, {"Retry-After": "3"})
        decision = await policy.should_retry(REQUEST, failure, 0)
        assert decision.delay == 3.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["RETRY-AFTER", "retry-after", "Retry-after"])
    async def test_retry_after_name_is_case_insensitive(self, policy, name):
        failure = status_failure(429, {name: "7"})
        decision = await policy.should_retry(REQUEST, failure, 0)
        assert decision.delay == 7.0

    @pytest.mark.asyncio
    async def test_retry_after_is_capped(self, policy):
        failure = status_failure(503, {"Retry-After": "120"})
        decision = await policy.should_retry(REQUEST, failure, 0)
        assert decision.delay == 10.0

    @pytest.mark.asyncio
    async def test_ignores_http_date_retry_after(self, policy):
        failure = status_failure(503, {"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"})
        decision = await policy.should_retry(REQUEST, failure, 1)
        assert decision.delay == 2.0

    @pytest.mark.asyncio
    async def test_network_retries_can_be_disabled(self):
        policy = ExponentialBackoffRetryPolicy(RetryConfig(retry_on_network_errors=False))
        decision = await policy.should_retry(REQUEST, NetworkError("down"), 0)
        assert decision.retry is False

    def test_delay_capped_at_max(self, policy):
        assert policy.calculate_delay(10) == 10.0

    def test_jitter_stays_within_bounds(self):
        policy = ExponentialBackoffRetryPolicy(
            RetryConfig(base_delay=1.0, jitter=True, jitter_factor=0.1)
        )
        for _ in range(50):
            assert 0.9 <= policy.calculate_delay(0) <= 1.1

    def test_config_validation(self):
        with pytest.raises(ValueError):
            RetryConfig(max_retries=-1)
