"""
Tests for operation, response and error models.
"""

import dataclasses

import pytest

from graphql_transport import (
    ConfigurationError,
    GraphQLHTTPResponseError,
    GraphQLMutation,
    GraphQLOperationType,
    GraphQLQuery,
    GraphQLResponse,
    HTTPClientConfig,
    JSONSerializationFormat,
    NetworkError,
    OperationIdentifierMissingError,
    RequestSerializationError,
    ResponseDecodingError,
    ResponseErrorKind,
    ResponseMetadata,
    TransportError,
)

METADATA = ResponseMetadata(status=502, url="https://api.example.com/graphql")


class TestOperations:
    """Test GraphQL operation models."""

    def test_query_defaults(self):
        query = GraphQLQuery(query="{ viewer { login } }")

        assert query.variables == {}
        assert query.operation_identifier is None
        assert query.operation_type == GraphQLOperationType.QUERY
        assert query.query_document == "{ viewer { login } }"

    def test_mutation_type(self):
        mutation = GraphQLMutation(
            query="mutation Like($id: ID!) { like(id: $id) }", variables={"id": "1"}
        )
        assert mutation.operation_type == GraphQLOperationType.MUTATION

    def test_operations_are_immutable(self):
        query = GraphQLQuery(query="{ a }")
        with pytest.raises(dataclasses.FrozenInstanceError):
            query.query = "{ b }"


class TestGraphQLResponse:
    """Test response envelope accessors."""

    def test_accessors(self):
        response = GraphQLResponse(
            operation=GraphQLQuery(query="{ user { profile { name } } }"),
            body={
                "data": {"user": {"profile": {"name": "Ada"}}},
                "extensions": {"cost": 3},
            },
        )

        assert response.get_data("user.profile.name") == "Ada"
        assert response.get_data("user.missing") is None
        assert response.extensions == {"cost": 3}
        assert response.errors == []
        assert response.has_errors is False

    def test_errors(self):
        response = GraphQLResponse(
            operation=GraphQLQuery(query="{ user { id } }"),
            body={"data": None, "errors": [{"message": "Denied"}, {}]},
        )

        assert response.has_errors
        assert response.error_messages == ["Denied", "Unknown error"]
        assert response.get_data() is None

    def test_empty_data_is_returned(self):
        response = GraphQLResponse(operation=GraphQLQuery(query="{ a }"), body={"data": {}})

        assert response.get_data() == {}
        assert response.get_data("a") is None

    def test_metadata_headers_ignore_case(self):
        metadata = ResponseMetadata(status=200, url="https://api.example.com/graphql", headers={"ETag": "v1"})
        assert metadata.headers["etag"] == "v1"


class TestErrors:
    """Test transport error types."""

    def test_body_description(self):
        error = GraphQLHTTPResponseError(b"Bad Gateway", METADATA, ResponseErrorKind.ERROR_RESPONSE)

        assert error.body_description == "Bad Gateway"
        assert str(error) == "Received error response: Bad Gateway"
        assert error.status_code == 502
        assert isinstance(error, TransportError)

    def test_empty_and_unreadable_bodies(self):
        empty = GraphQLHTTPResponseError(None, METADATA, ResponseErrorKind.INVALID_RESPONSE)
        unreadable = GraphQLHTTPResponseError(b"\xff\xfe", METADATA, ResponseErrorKind.INVALID_RESPONSE)

        assert str(empty) == "Received invalid response: Empty response body"
        assert unreadable.body_description == "Unreadable response body"

    def test_kind_values(self):
        assert ResponseErrorKind.ERROR_RESPONSE.value == "errorResponse"
        assert ResponseErrorKind.INVALID_RESPONSE.value == "invalidResponse"

    def test_identifier_error_is_configuration_error(self):
        error = OperationIdentifierMissingError("GetUser")
        assert isinstance(error, ConfigurationError)
        assert "GetUser" in error.message

    def test_network_error_passthrough(self):
        error = NetworkError("down")
        assert NetworkError.from_exception(error) is error


class TestSerialization:
    """Test JSON wire format."""

    def test_round_trip_of_unicode(self):
        data = JSONSerializationFormat.serialize({"name": "Zoë"})
        assert JSONSerializationFormat.deserialize(data) == {"name": "Zoë"}

    def test_serialize_rejects_nan(self):
        with pytest.raises(RequestSerializationError):
            JSONSerializationFormat.serialize({"x": float("nan")})

    def test_deserialize_rejects_garbage(self):
        with pytest.raises(ResponseDecodingError):
            JSONSerializationFormat.deserialize(b"{not json")


class TestConfig:
    """Test HTTP client configuration."""

    def test_defaults(self):
        config = HTTPClientConfig()
        assert config.timeout == 30.0
        assert config.verify_ssl is True

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValueError):
            HTTPClientConfig(retries=3)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            HTTPClientConfig(timeout=0)
