"""
GraphQL operation and response models.

This module defines the operations sent by the transport and the response
envelope handed back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from multidict import CIMultiDict


class GraphQLOperationType(str, Enum):
    """GraphQL operation types."""

    QUERY = "query"
    MUTATION = "mutation"


@dataclass(frozen=True)
class GraphQLOperation:
    """
    A GraphQL operation ready to be sent.

    Attributes:
        query: Operation definition text
        variables: JSON-compatible variable values
        operation_identifier: Persisted operation id, for servers that
            support query persistence
        operation_name: Name of the operation, if any
        fragments: Fragment definitions referenced by the operation
    """

    query: str
    variables: Mapping[str, Any] = field(default_factory=dict)
    operation_identifier: Optional[str] = None
    operation_name: Optional[str] = None
    fragments: Tuple[str, ...] = ()
    operation_type: GraphQLOperationType = GraphQLOperationType.QUERY

    @property
    def query_document(self) -> str:
        """Operation definition followed by its fragment definitions."""
        if not self.fragments:
            return self.query
        return "\n".join((self.query, *self.fragments))


@dataclass(frozen=True)
class GraphQLQuery(GraphQLOperation):
    """GraphQL query operation."""

    operation_type: GraphQLOperationType = field(
        default=GraphQLOperationType.QUERY, init=False
    )


@dataclass(frozen=True)
class GraphQLMutation(GraphQLOperation):
    """GraphQL mutation operation."""

    operation_type: GraphQLOperationType = field(
        default=GraphQLOperationType.MUTATION, init=False
    )


@dataclass(frozen=True)
class ResponseMetadata:
    """Status line and headers of an HTTP response."""

    status: int
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        # Keeps repeated headers and matches names case-insensitively
        object.__setattr__(self, "headers", CIMultiDict(self.headers))


@dataclass(frozen=True)
class GraphQLResponse:
    """
    Parsed response body paired with the operation that produced it.

    The body is passed through verbatim; the accessors below only read from it.
    """

    operation: GraphQLOperation
    body: Dict[str, Any]
    metadata: Optional[ResponseMetadata] = None

    @property
    def data(self) -> Optional[Dict[str, Any]]:
        return self.body.get("data")

    @property
    def errors(self) -> List[Dict[str, Any]]:
        return self.body.get("errors") or []

    @property
    def extensions(self) -> Optional[Dict[str, Any]]:
        return self.body.get("extensions")

    @property
    def has_errors(self) -> bool:
        """Check if the body carries GraphQL errors."""
        return len(self.errors) > 0

    @property
    def error_messages(self) -> List[str]:
        """Get list of error messages."""
        return [error.get("message", "Unknown error") for error in self.errors]

    def get_data(self, path: Optional[str] = None) -> Any:
        """
        Get data from the response with optional path.

        Args:
            path: Dot-separated path to data (e.g., "user.profile.name")

        Returns:
            Data at the specified path or full data if no path
        """
        if self.data is None:
            return None

        if not path:
            return self.data

        current: Any = self.data
        for key in path.split("."):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return None

        return current
