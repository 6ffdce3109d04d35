"""
GraphQL HTTP transport.

Sends GraphQL operations as JSON POST requests over aiohttp and returns the
parsed response envelopes, with pluggable request adapters and retry policies.
"""

from .adapters import (
    APIKeyAdapter,
    APIKeyConfig,
    APIKeyLocation,
    BearerTokenAdapter,
    BearerTokenConfig,
    CompositeAdapter,
    HeaderAdapter,
    RequestAdapter,
)
from .config import HTTPClientConfig
from .exceptions import (
    ConfigurationError,
    GraphQLHTTPResponseError,
    HTTPStatusError,
    NetworkError,
    OperationIdentifierMissingError,
    RequestAdaptationError,
    RequestSerializationError,
    ResponseDecodingError,
    ResponseErrorKind,
    TimeoutError,
    TransportError,
)
from .http_client import HTTPClient, HTTPRequest, HTTPResponse
from .models import (
    GraphQLMutation,
    GraphQLOperation,
    GraphQLOperationType,
    GraphQLQuery,
    GraphQLResponse,
    ResponseMetadata,
)
from .retry import (
    ExponentialBackoffRetryPolicy,
    RetryConfig,
    RetryDecision,
    RetryPolicy,
)
from .serialization import JSONSerializationFormat
from .transport import Cancellable, CompletionHandler, HTTPNetworkTransport, RequestHandle

__version__ = "1.0.0"

__all__ = [
    # Transport
    "HTTPNetworkTransport",
    "RequestHandle",
    "Cancellable",
    "CompletionHandler",
    # Models
    "GraphQLOperation",
    "GraphQLOperationType",
    "GraphQLQuery",
    "GraphQLMutation",
    "GraphQLResponse",
    "ResponseMetadata",
    # HTTP client
    "HTTPClient",
    "HTTPClientConfig",
    "HTTPRequest",
    "HTTPResponse",
    "JSONSerializationFormat",
    # Adapters
    "RequestAdapter",
    "HeaderAdapter",
    "BearerTokenAdapter",
    "BearerTokenConfig",
    "APIKeyAdapter",
    "APIKeyConfig",
    "APIKeyLocation",
    "CompositeAdapter",
    # Retry
    "RetryPolicy",
    "RetryDecision",
    "RetryConfig",
    "ExponentialBackoffRetryPolicy",
    # Exceptions
    "TransportError",
    "ConfigurationError",
    "OperationIdentifierMissingError",
    "RequestSerializationError",
    "ResponseDecodingError",
    "RequestAdaptationError",
    "NetworkError",
    "TimeoutError",
    "HTTPStatusError",
    "GraphQLHTTPResponseError",
    "ResponseErrorKind",
]
