"""
Request adapters.

An adapter receives every outgoing request before it is sent, including each
retried attempt, and returns the request to send in its place. Typical uses
are injecting authentication credentials or static headers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import RequestAdaptationError
from .http_client import HTTPRequest


class RequestAdapter(ABC):
    """Capability: rewrite an outgoing request before it is sent."""

    @abstractmethod
    async def adapt(self, request: HTTPRequest) -> HTTPRequest:
        """
        Return the request to send in place of ``request``.

        Raises:
            RequestAdaptationError: If the request cannot be adapted
        """


class HeaderAdapter(RequestAdapter):
    """Adds a fixed set of headers to every request."""

    def __init__(self, headers: Mapping[str, str]):
        self.headers = dict(headers)

    async def adapt(self, request: HTTPRequest) -> HTTPRequest:
        return request.with_headers(self.headers)


class BearerTokenConfig(BaseModel):
    """Configuration for Bearer token authentication."""

    token: str = Field(description="Bearer token value")
    header_name: str = Field(default="Authorization", description="Header name for the token")

    model_config = ConfigDict(frozen=True)


class BearerTokenAdapter(RequestAdapter):
    """
    Adds a Bearer token to the Authorization header.

    Example:
        ```python
        adapter = BearerTokenAdapter(BearerTokenConfig(token="your-bearer-token"))

        # Custom header name
        adapter = BearerTokenAdapter(
            BearerTokenConfig(token="your-token", header_name="X-Auth-Token")
        )
        ```
    """

    def __init__(self, config: BearerTokenConfig):
        self.config = config

    async def adapt(self, request: HTTPRequest) -> HTTPRequest:
        if not self.config.token:
            raise RequestAdaptationError(
                "Bearer token is required but not provided", url=request.url
            )
        return request.with_headers({self.config.header_name: f"Bearer {self.config.token}"})


class APIKeyLocation(str, Enum):
    """Where to place an API key."""

    HEADER = "header"
    QUERY = "query"


class APIKeyConfig(BaseModel):
    """Configuration for API key authentication."""

    api_key: str = Field(description="The API key value")
    key_name: str = Field(default="X-API-Key", description="Header or query parameter name")
    location: APIKeyLocation = Field(
        default=APIKeyLocation.HEADER, description="Where to place the API key"
    )
    prefix: Optional[str] = Field(
        default=None, description="Optional prefix for the API key (e.g., 'Token')"
    )

    model_config = ConfigDict(frozen=True)


class APIKeyAdapter(RequestAdapter):
    """
    Places an API key in a header or query parameter.

    Example:
        ```python
        adapter = APIKeyAdapter(APIKeyConfig(api_key="your-api-key"))

        adapter = APIKeyAdapter(
            APIKeyConfig(
                api_key="your-api-key",
                key_name="api_key",
                location=APIKeyLocation.QUERY,
            )
        )
        ```
    """

    def __init__(self, config: APIKeyConfig):
        self.config = config

    async def adapt(self, request: HTTPRequest) -> HTTPRequest:
        if not self.config.api_key:
            raise RequestAdaptationError(
                "API key is required but not provided", url=request.url
            )

        key_value = self.config.api_key
        if self.config.prefix:
            key_value = f"{self.config.prefix} {key_value}"

        if self.config.location == APIKeyLocation.QUERY:
            return request.with_params({self.config.key_name: key_value})
        return request.with_headers({self.config.key_name: key_value})


class CompositeAdapter(RequestAdapter):
    """Applies several adapters in order, each seeing the previous one's output."""

    def __init__(self, adapters: Iterable[RequestAdapter]):
        self.adapters: List[RequestAdapter] = list(adapters)

    async def adapt(self, request: HTTPRequest) -> HTTPRequest:
        for adapter in self.adapters:
            request = await adapter.adapt(request)
        return request
