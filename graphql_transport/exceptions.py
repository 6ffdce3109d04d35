"""
Exception hierarchy for the GraphQL HTTP transport.

Errors fall into three groups:

- configuration errors raised synchronously by ``send`` when the caller breaks
  the transport's contract (for example identifier mode without identifiers);
- transport-level failures where no HTTP response was received;
- protocol-level failures where a response arrived but could not be used,
  carrying the raw body and response metadata for diagnostics.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import aiohttp

if TYPE_CHECKING:
    from .http_client import HTTPResponse
    from .models import ResponseMetadata


class TransportError(Exception):
    """
    Base exception for all transport operations.

    Attributes:
        message: Human-readable error message
        url: URL that caused the error (if applicable)
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = kwargs


class ConfigurationError(TransportError):
    """Raised when the transport is used in a way its configuration forbids."""

    pass


class OperationIdentifierMissingError(ConfigurationError):
    """
    Raised when identifier mode is enabled but the operation has no identifier.

    This is a caller contract violation: operations must be generated with
    persisted operation identifiers to be sent in identifier mode.
    """

    def __init__(self, operation_name: Optional[str] = None) -> None:
        message = (
            "To send operation identifiers, operations must be generated "
            "with operation identifiers"
        )
        if operation_name:
            message = f"{message} (operation '{operation_name}' has none)"
        super().__init__(message)
        self.operation_name = operation_name


class RequestSerializationError(TransportError):
    """Raised when a request body cannot be serialized to JSON."""

    pass


class ResponseDecodingError(TransportError):
    """Raised by the serializer when bytes are not valid JSON."""

    pass


class RequestAdaptationError(TransportError):
    """Raised when a request adapter fails to adapt an outgoing request."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, url)
        self.original_error = original_error


class NetworkError(TransportError):
    """
    Raised when a request fails before any HTTP response was received.

    Covers connection failures, DNS resolution and SSL errors, payload errors
    and anything else the HTTP client reports without a response.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, url)
        self.original_error = original_error

    @classmethod
    def from_exception(
        cls, error: BaseException, url: Optional[str] = None
    ) -> "NetworkError":
        """
        Convert an aiohttp or asyncio exception to a NetworkError.

        Args:
            error: The original exception
            url: The URL that caused the error

        Returns:
            TimeoutError for timeouts, NetworkError otherwise
        """
        if isinstance(error, NetworkError):
            return error

        if isinstance(error, asyncio.TimeoutError):
            return TimeoutError(f"Request timed out: {error!r}", url=url, original_error=error)

        if isinstance(error, aiohttp.ClientSSLError):
            return cls(f"SSL error: {error}", url=url, original_error=error)

        if isinstance(error, aiohttp.ClientConnectionError):
            return cls(f"Connection error: {error}", url=url, original_error=error)

        if isinstance(error, aiohttp.ClientPayloadError):
            return cls(f"Payload error: {error}", url=url, original_error=error)

        return cls(f"Unexpected network error: {error}", url=url, original_error=error)


class TimeoutError(NetworkError):
    """Raised when a request exceeds the configured timeout."""

    pass


class HTTPStatusError(TransportError):
    """
    Raised by the HTTP client when a response fails status validation.

    Attributes:
        response: The full HTTP response, body included
    """

    def __init__(self, response: "HTTPResponse") -> None:
        super().__init__(
            f"Response status code was unacceptable: {response.status}",
            url=response.url,
        )
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status


class ResponseErrorKind(str, Enum):
    """Why an HTTP response could not be turned into a GraphQL response."""

    ERROR_RESPONSE = "errorResponse"
    INVALID_RESPONSE = "invalidResponse"


class GraphQLHTTPResponseError(TransportError):
    """
    A response was received but cannot be used as a GraphQL response.

    Attributes:
        body: Raw response body, if any
        response: Metadata of the HTTP response
        kind: ERROR_RESPONSE for unacceptable statuses,
            INVALID_RESPONSE for bodies that are not JSON objects
    """

    def __init__(
        self,
        body: Optional[bytes],
        response: "ResponseMetadata",
        kind: ResponseErrorKind,
    ) -> None:
        self.body = body
        self.response = response
        self.kind = kind
        super().__init__(self._describe(), url=response.url)

    @property
    def body_description(self) -> str:
        """Response body decoded as UTF-8 for display."""
        if not self.body:
            return "Empty response body"
        try:
            return self.body.decode("utf-8")
        except UnicodeDecodeError:
            return "Unreadable response body"

    @property
    def status_code(self) -> int:
        return self.response.status

    def _describe(self) -> str:
        if self.kind == ResponseErrorKind.ERROR_RESPONSE:
            prefix = "Received error response"
        else:
            prefix = "Received invalid response"
        return f"{prefix}: {self.body_description}"
