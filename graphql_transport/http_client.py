"""
HTTP client used by the transport.

Wraps an aiohttp session and composes the two pluggable hooks: a request
adapter that may rewrite each outgoing request, and a retry policy consulted
whenever an attempt fails.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

import aiohttp
from multidict import CIMultiDict

from .config import HTTPClientConfig
from .exceptions import (
    HTTPStatusError,
    NetworkError,
    RequestAdaptationError,
    TransportError,
)
from .models import ResponseMetadata

if TYPE_CHECKING:
    from .adapters import RequestAdapter
    from .retry import RetryPolicy

logger = logging.getLogger(__name__)

# Failures offered to the retry policy
Failure = Union[NetworkError, HTTPStatusError]

SENSITIVE_HEADERS = frozenset(
    {"authorization", "proxy-authorization", "cookie", "x-api-key", "api-key"}
)


def mask_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy of ``headers`` with credential values masked, for logging."""
    return {
        name: "***MASKED***" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


@dataclass(frozen=True)
class HTTPRequest:
    """An outgoing HTTP request. Adapters derive new requests with ``replace``."""

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    params: Mapping[str, str] = field(default_factory=dict)

    def replace(self, **changes: Any) -> "HTTPRequest":
        return replace(self, **changes)

    def with_headers(self, headers: Mapping[str, str]) -> "HTTPRequest":
        """Return a copy with ``headers`` merged over the existing ones."""
        merged = CIMultiDict(self.headers)
        merged.update(headers)
        return self.replace(headers=merged)

    def with_params(self, params: Mapping[str, str]) -> "HTTPRequest":
        """Return a copy with ``params`` merged into the query string."""
        merged = dict(self.params)
        merged.update(params)
        return self.replace(params=merged)


@dataclass(frozen=True)
class HTTPResponse:
    """A fully read HTTP response. Header lookups are case-insensitive."""

    status: int
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", CIMultiDict(self.headers))

    @property
    def metadata(self) -> ResponseMetadata:
        return ResponseMetadata(
            status=self.status, url=self.url, headers=self.headers, reason=self.reason
        )


class HTTPClient:
    """
    aiohttp-backed HTTP client with request adaptation and retry hooks.

    Every attempt is adapted first, then sent; the response body is read in
    full and its status validated. Network failures and unacceptable statuses
    are offered to the retry policy, which decides whether to send again.
    Without a retry policy nothing is retried.

    Example:
        ```python
        client = HTTPClient(
            HTTPClientConfig(timeout=10.0),
            request_adapter=BearerTokenAdapter(BearerTokenConfig(token="...")),
            retry_policy=ExponentialBackoffRetryPolicy(),
        )
        async with client:
            response = await client.execute(
                HTTPRequest(method="POST", url="https://api.example.com/graphql", body=b"{}")
            )
        ```
    """

    def __init__(
        self,
        config: Optional[HTTPClientConfig] = None,
        request_adapter: Optional["RequestAdapter"] = None,
        retry_policy: Optional["RetryPolicy"] = None,
        acceptable_status: range = range(200, 300),
    ):
        """
        Initialize HTTP client.

        Args:
            config: Session configuration
            request_adapter: Optional hook applied to every outgoing request
            retry_policy: Optional hook deciding whether a failed attempt is resent
            acceptable_status: Status codes that pass validation
        """
        self.config = config or HTTPClientConfig()
        self.request_adapter = request_adapter
        self.retry_policy = retry_policy
        self.acceptable_status = acceptable_status

        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "HTTPClient":
        self._get_session()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    def _get_session(self) -> aiohttp.ClientSession:
        """Return the session, creating it on first use."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.config.max_connections,
                limit_per_host=self.config.max_connections_per_host,
                keepalive_timeout=self.config.keepalive_timeout,
                ssl=self.config.verify_ssl,
            )
            timeout = aiohttp.ClientTimeout(
                total=self.config.timeout,
                connect=self.config.connect_timeout,
                sock_read=self.config.sock_read_timeout,
            )
            headers = {"User-Agent": self.config.user_agent}
            headers.update(self.config.headers)

            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=timeout,
                headers=headers,
                trust_env=self.config.trust_env,
                raise_for_status=False,  # validated in execute()
            )
            logger.debug("HTTP session created")
        return self._session

    async def close(self) -> None:
        """Close the session and its connections."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def execute(self, request: HTTPRequest) -> HTTPResponse:
        """
        Send a request, retrying as the retry policy decides.

        Args:
            request: The request to send, before adaptation

        Returns:
            HTTPResponse whose status is acceptable

        Raises:
            NetworkError: If no response was received
            HTTPStatusError: If the final response has an unacceptable status
            RequestAdaptationError: If the request adapter fails
        """
        attempt = 0
        while True:
            adapted = await self._adapt(request)
            try:
                response = await self._send(adapted)
                self._validate(response)
                return response
            except (NetworkError, HTTPStatusError) as failure:
                if self.retry_policy is None:
                    raise

                decision = await self.retry_policy.should_retry(adapted, failure, attempt)
                if not decision.retry:
                    logger.debug(
                        "Giving up on %s %s after %d attempt(s): %s",
                        adapted.method, adapted.url, attempt + 1, failure,
                    )
                    raise

                logger.warning(
                    "Attempt %d for %s %s failed (%s), retrying in %.2fs",
                    attempt + 1, adapted.method, adapted.url, failure, decision.delay,
                )
                if decision.delay > 0:
                    await asyncio.sleep(decision.delay)
                attempt += 1

    async def _adapt(self, request: HTTPRequest) -> HTTPRequest:
        if self.request_adapter is None:
            return request
        try:
            return await self.request_adapter.adapt(request)
        except TransportError:
            raise
        except Exception as e:
            raise RequestAdaptationError(
                f"Request adaptation failed: {e}", url=request.url, original_error=e
            ) from e

    async def _send(self, request: HTTPRequest) -> HTTPResponse:
        session = self._get_session()
        logger.debug(
            "%s %s headers=%s", request.method, request.url, mask_headers(request.headers)
        )
        try:
            async with session.request(
                request.method,
                request.url,
                data=request.body,
                headers=request.headers,
                params=dict(request.params) or None,
            ) as resp:
                body = await resp.read()
                response = HTTPResponse(
                    status=resp.status,
                    url=str(resp.url),
                    headers=resp.headers,
                    body=body,
                    reason=resp.reason,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError.from_exception(e, url=request.url) from e

        logger.debug("%s %s -> %d (%d bytes)", request.method, request.url, response.status, len(body))
        return response

    def _validate(self, response: HTTPResponse) -> None:
        if response.status not in self.acceptable_status:
            raise HTTPStatusError(response)
