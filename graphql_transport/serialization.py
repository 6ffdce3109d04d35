"""JSON wire format for request and response bodies."""

from __future__ import annotations

import json
from typing import Any

from .exceptions import RequestSerializationError, ResponseDecodingError


class JSONSerializationFormat:
    """Converts JSON-compatible values to UTF-8 bytes and back."""

    content_type = "application/json"

    @staticmethod
    def serialize(value: Any) -> bytes:
        try:
            return json.dumps(
                value, separators=(",", ":"), ensure_ascii=False, allow_nan=False
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RequestSerializationError(f"Value is not JSON serializable: {e}") from e

    @staticmethod
    def deserialize(data: bytes) -> Any:
        try:
            return json.loads(data)
        except (UnicodeDecodeError, ValueError) as e:
            raise ResponseDecodingError(f"Invalid JSON: {e}") from e
