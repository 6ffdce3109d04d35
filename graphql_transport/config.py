"""
Configuration models for the HTTP client behind the transport.

Timeouts and connection limits live here rather than in the transport, which
has no timeout policy of its own.
"""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_USER_AGENT = "graphql-http-transport/1.0"


class HTTPClientConfig(BaseModel):
    """Configuration for the aiohttp session used to send operations."""

    # Timeout settings
    timeout: float = Field(default=30.0, gt=0, description="Total request timeout in seconds")
    connect_timeout: float = Field(default=10.0, gt=0, description="Connection timeout in seconds")
    sock_read_timeout: float = Field(default=30.0, gt=0, description="Socket read timeout in seconds")

    # Connection settings
    max_connections: int = Field(default=100, ge=1, description="Maximum connections")
    max_connections_per_host: int = Field(default=30, ge=1, description="Max connections per host")
    keepalive_timeout: float = Field(default=30.0, ge=1.0, description="Keep-alive timeout")

    # Request settings
    headers: Dict[str, str] = Field(default_factory=dict, description="Default headers for every request")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header value")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    trust_env: bool = Field(default=False, description="Read proxy settings from the environment")

    model_config = ConfigDict(extra="forbid", frozen=True)
