#!/usr/bin/env python3
"""
Basic usage examples for graphql_transport.

Demonstrates awaiting a response, callback-style completion, persisted
operation identifiers, authentication and retries.
"""

import asyncio

from graphql_transport import (
    BearerTokenAdapter,
    BearerTokenConfig,
    ExponentialBackoffRetryPolicy,
    GraphQLHTTPResponseError,
    GraphQLQuery,
    HTTPClientConfig,
    HTTPNetworkTransport,
    RetryConfig,
    TransportError,
)

ENDPOINT = "https://countries.trevorblades.com/graphql"

COUNTRY_QUERY = GraphQLQuery(
    query="query Country($code: ID!) { country(code: $code) { name capital } }",
    variables={"code": "NZ"},
    operation_name="Country",
)


async def example_fetch() -> None:
    """Example: await a single response."""
    print("=== Fetch ===")

    async with HTTPNetworkTransport(ENDPOINT) as transport:
        try:
            response = await transport.fetch(COUNTRY_QUERY)
        except GraphQLHTTPResponseError as e:
            print(f"HTTP {e.status_code}: {e.body_description}")
            return
        except TransportError as e:
            print(f"Request failed: {e}")
            return

        print(f"Country: {response.get_data('country.name')}")
        print(f"Capital: {response.get_data('country.capital')}")
        if response.has_errors:
            print(f"GraphQL errors: {response.error_messages}")
    print()


async def example_callback() -> None:
    """Example: completion handler and cancellation."""
    print("=== Callback ===")

    def on_complete(response, error):
        if error is not None:
            print(f"Failed: {error}")
        else:
            print(f"Received: {response.data}")

    async with HTTPNetworkTransport(ENDPOINT) as transport:
        handle = transport.send(COUNTRY_QUERY, on_complete)
        try:
            await handle
        except TransportError:
            pass  # already reported by on_complete

        # A request cancelled before it completes never calls its handler
        cancelled = transport.send(COUNTRY_QUERY, on_complete)
        cancelled.cancel()
    print()


async def example_authenticated() -> None:
    """Example: bearer token, retries and persisted queries."""
    print("=== Authenticated, persisted ===")

    transport = HTTPNetworkTransport(
        "https://api.example.com/graphql",
        config=HTTPClientConfig(timeout=10.0, headers={"X-Client-Name": "examples"}),
        request_adapter=BearerTokenAdapter(BearerTokenConfig(token="your-token")),
        retry_policy=ExponentialBackoffRetryPolicy(RetryConfig(max_retries=2, base_delay=0.5)),
        send_operation_identifiers=True,
    )
    query = GraphQLQuery(
        query="query Viewer { viewer { login } }",
        operation_identifier="2f1e6c0a",
    )
    async with transport:
        try:
            response = await transport.fetch(query)
            print(f"Viewer: {response.get_data('viewer.login')}")
        except TransportError as e:
            print(f"Request failed: {e}")
    print()


async def main() -> None:
    await example_fetch()
    await example_callback()
    await example_authenticated()


if __name__ == "__main__":
    asyncio.run(main())
