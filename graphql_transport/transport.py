"""
HTTP network transport for GraphQL operations.

This module sends GraphQL operations as JSON POST requests through an
aiohttp-backed HTTP client and turns the responses into GraphQL response
envelopes.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from typing import Any, Callable, Dict, Generator, Optional, Protocol, Tuple, cast

from .adapters import RequestAdapter
from .config import HTTPClientConfig
from .exceptions import (
    ConfigurationError,
    GraphQLHTTPResponseError,
    HTTPStatusError,
    OperationIdentifierMissingError,
    ResponseDecodingError,
    ResponseErrorKind,
)
from .http_client import HTTPClient, HTTPRequest, HTTPResponse
from .models import GraphQLOperation, GraphQLResponse
from .retry import RetryPolicy
from .serialization import JSONSerializationFormat

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[Optional[GraphQLResponse], Optional[BaseException]], None]


class Cancellable(Protocol):
    """An in-flight request that can be cancelled."""

    def cancel(self) -> None:
        ...


class RequestHandle:
    """
    Handle for a request started by ``HTTPNetworkTransport.send``.

    Awaiting the handle yields the GraphQLResponse or raises the error the
    completion handler received. Cancelling it cancels the underlying HTTP
    request; a cancelled request never reaches its completion handler.
    """

    def __init__(self, task: "asyncio.Task[GraphQLResponse]", operation: GraphQLOperation):
        self._task = task
        self.operation = operation
        task.add_done_callback(self._retrieve_exception)

    @staticmethod
    def _retrieve_exception(task: "asyncio.Task[GraphQLResponse]") -> None:
        # Callback-only callers never await the handle; mark the outcome as seen.
        if not task.cancelled():
            task.exception()

    def cancel(self) -> None:
        self._task.cancel()

    def cancelled(self) -> bool:
        return self._task.cancelled()

    def done(self) -> bool:
        return self._task.done()

    async def result(self) -> GraphQLResponse:
        return await self._task

    def __await__(self) -> Generator[Any, None, GraphQLResponse]:
        return self._task.__await__()


class HTTPNetworkTransport:
    """
    A network transport that sends GraphQL operations as HTTP POST requests.

    Each ``send`` is independent: the request body is built and serialized
    up front, dispatched through the HTTP client, and the response is
    deserialized on a worker executor before the completion handler runs
    there too. Request adaptation and retries are delegated to the hooks
    composed into the HTTP client.

    Examples:
        Callback style:
        ```python
        transport = HTTPNetworkTransport("https://api.example.com/graphql")

        def on_complete(response, error):
            if error is not None:
                print(f"Request failed: {error}")
            else:
                print(response.data)

        handle = transport.send(GraphQLQuery(query="{ viewer { login } }"), on_complete)
        ```

        Awaiting the result, with authentication and retries:
        ```python
        async with HTTPNetworkTransport(
            "https://api.example.com/graphql",
            request_adapter=BearerTokenAdapter(BearerTokenConfig(token="...")),
            retry_policy=ExponentialBackoffRetryPolicy(),
        ) as transport:
            response = await transport.fetch(
                GraphQLQuery(
                    query="query GetUser($id: ID!) { user(id: $id) { name } }",
                    variables={"id": "123"},
                )
            )
        ```

        Persisted queries:
        ```python
        transport = HTTPNetworkTransport(url, send_operation_identifiers=True)
        transport.send(GraphQLQuery(query=text, operation_identifier="5f1c..."))
        ```
    """

    serialization_format = JSONSerializationFormat

    def __init__(
        self,
        url: Any,
        config: Optional[HTTPClientConfig] = None,
        request_adapter: Optional[RequestAdapter] = None,
        retry_policy: Optional[RetryPolicy] = None,
        send_operation_identifiers: bool = False,
        http_client: Optional[HTTPClient] = None,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize the transport.

        Args:
            url: URL of the GraphQL server
            config: HTTP session configuration
            request_adapter: Optional hook applied to every outgoing request
            retry_policy: Optional hook deciding whether a failed request is resent
            send_operation_identifiers: Send persisted operation identifiers
                instead of the full operation text
            http_client: Ready-made HTTP client; cannot be combined with
                ``config``, ``request_adapter`` or ``retry_policy``
            executor: Executor for deserialization and completion handlers;
                defaults to the event loop's default executor

        Raises:
            ConfigurationError: If ``http_client`` is given together with
                settings it would not use
        """
        if http_client is not None and (
            config is not None or request_adapter is not None or retry_policy is not None
        ):
            raise ConfigurationError(
                "config, request_adapter and retry_policy belong to the HTTP client; "
                "configure the injected http_client instead",
                url=str(url),
            )

        self.url = str(url)
        self.send_operation_identifiers = send_operation_identifiers
        self.executor = executor

        self._owns_client = http_client is None
        self.http_client = http_client or HTTPClient(
            config, request_adapter=request_adapter, retry_policy=retry_policy
        )

    async def __aenter__(self) -> "HTTPNetworkTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self.http_client.close()

    def send(
        self,
        operation: GraphQLOperation,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> RequestHandle:
        """
        Send a GraphQL operation to the server.

        Returns immediately; must be called from a running event loop.

        Args:
            operation: The operation to send
            completion_handler: Called exactly once, unless the request is
                cancelled, with ``(response, None)`` on success or
                ``(None, error)`` on failure

        Returns:
            RequestHandle that can be awaited or cancelled

        Raises:
            OperationIdentifierMissingError: In identifier mode, if the
                operation has no identifier
            RequestSerializationError: If the variables are not JSON-compatible
        """
        body = self.request_body(operation)
        request = HTTPRequest(
            method="POST",
            url=self.url,
            headers={"Content-Type": self.serialization_format.content_type},
            body=self.serialization_format.serialize(body),
        )

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._perform(operation, request, completion_handler))
        logger.debug("Dispatched %s to %s", _describe(operation), self.url)
        return RequestHandle(task, operation)

    async def fetch(self, operation: GraphQLOperation) -> GraphQLResponse:
        """Send an operation and wait for its response."""
        return await self.send(operation)

    def request_body(self, operation: GraphQLOperation) -> Dict[str, Any]:
        """Build the JSON request body for an operation."""
        if self.send_operation_identifiers:
            if not operation.operation_identifier:
                raise OperationIdentifierMissingError(operation.operation_name)
            return {"id": operation.operation_identifier, "variables": dict(operation.variables)}
        return {"query": operation.query_document, "variables": dict(operation.variables)}

    async def _perform(
        self,
        operation: GraphQLOperation,
        request: HTTPRequest,
        completion_handler: Optional[CompletionHandler],
    ) -> GraphQLResponse:
        http_response: Optional[HTTPResponse] = None
        failure: Optional[Exception] = None
        try:
            http_response = await self.http_client.execute(request)
        except Exception as e:
            failure = e

        loop = asyncio.get_running_loop()
        response, error = await loop.run_in_executor(
            self.executor, self._complete, operation, http_response, failure, completion_handler
        )
        if error is not None:
            raise error
        return cast(GraphQLResponse, response)

    def _complete(
        self,
        operation: GraphQLOperation,
        http_response: Optional[HTTPResponse],
        failure: Optional[Exception],
        completion_handler: Optional[CompletionHandler],
    ) -> Tuple[Optional[GraphQLResponse], Optional[BaseException]]:
        """Runs on the executor: classify the outcome and notify the handler."""
        response: Optional[GraphQLResponse] = None
        error: Optional[BaseException] = None

        if isinstance(failure, HTTPStatusError):
            error = GraphQLHTTPResponseError(
                failure.response.body,
                failure.response.metadata,
                ResponseErrorKind.ERROR_RESPONSE,
            )
            error.__cause__ = failure
        elif failure is not None:
            error = failure
        elif http_response is not None:
            try:
                response = self._parse_response(operation, http_response)
            except GraphQLHTTPResponseError as e:
                error = e

        if error is not None:
            logger.debug("%s failed: %s", _describe(operation), error)

        if completion_handler is not None:
            try:
                completion_handler(response, error)
            except Exception:
                logger.exception("Completion handler for %s raised", _describe(operation))

        return response, error

    def _parse_response(
        self, operation: GraphQLOperation, http_response: HTTPResponse
    ) -> GraphQLResponse:
        metadata = http_response.metadata
        try:
            body = self.serialization_format.deserialize(http_response.body)
        except ResponseDecodingError as e:
            raise GraphQLHTTPResponseError(
                http_response.body, metadata, ResponseErrorKind.INVALID_RESPONSE
            ) from e

        if not isinstance(body, dict):
            raise GraphQLHTTPResponseError(
                http_response.body, metadata, ResponseErrorKind.INVALID_RESPONSE
            )

        return GraphQLResponse(operation=operation, body=body, metadata=metadata)


def _describe(operation: GraphQLOperation) -> str:
    name = operation.operation_name or operation.operation_identifier or "anonymous"
    return f"{operation.operation_type.value} {name}"
