"""
Shared test fixtures and configuration for the graphql_transport test suite.
"""

import asyncio
from typing import AsyncGenerator, List, Optional, Tuple

import pytest
from aioresponses import aioresponses

from graphql_transport import (
    GraphQLQuery,
    GraphQLResponse,
    HTTPNetworkTransport,
    HTTPRequest,
)

GRAPHQL_URL = "https://api.example.com/graphql"


class RecordingHandler:
    """Completion handler that records every invocation."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Optional[GraphQLResponse], Optional[BaseException]]] = []

    def __call__(self, response, error) -> None:
        self.calls.append((response, error))


class BlockingHTTPClient:
    """HTTP client whose requests never complete until cancelled."""

    def __init__(self) -> None:
        self.requests: List[HTTPRequest] = []
        self.started = asyncio.Event()

    async def execute(self, request: HTTPRequest):
        self.requests.append(request)
        self.started.set()
        await asyncio.Event().wait()

    async def close(self) -> None:
        pass


@pytest.fixture
def graphql_url() -> str:
    return GRAPHQL_URL


@pytest.fixture
def mock_aiohttp():
    """Mock aiohttp responses for testing."""
    with aioresponses() as m:
        yield m


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def user_query() -> GraphQLQuery:
    """Sample query with variables and a persisted identifier."""
    return GraphQLQuery(
        query="query GetUser($id: ID!) { user(id: $id) { id name } }",
        variables={"id": "123"},
        operation_name="GetUser",
        operation_identifier="a1b2c3",
    )


@pytest.fixture
async def transport() -> AsyncGenerator[HTTPNetworkTransport, None]:
    """Transport sending full operation text."""
    transport = HTTPNetworkTransport(GRAPHQL_URL)
    yield transport
    await transport.close()


@pytest.fixture
async def identifier_transport() -> AsyncGenerator[HTTPNetworkTransport, None]:
    """Transport sending persisted operation identifiers."""
    transport = HTTPNetworkTransport(GRAPHQL_URL, send_operation_identifiers=True)
    yield transport
    await transport.close()


@pytest.fixture
def blocking_client() -> BlockingHTTPClient:
    return BlockingHTTPClient()
