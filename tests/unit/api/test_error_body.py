"""Tests for the API error body and exception handlers."""

from unittest.mock import Mock

import orjson

from kinderhub.api.errors import (
    Message,
    MessageType,
    Result,
    app_error_handler,
    error_response,
    generic_exception_handler,
)
from kinderhub.errors import ConflictError, ForbiddenError, NotFoundError, StoreError


def make_request(path: str = "/api/v4/kids") -> Mock:
    request = Mock()
    request.method = "GET"
    request.url = Mock()
    request.url.path = path
    return request


def body_of(response) -> dict:
    return orjson.loads(response.body)


class TestMessage:
    """Test Message model."""

    def test_alias(self) -> None:
        """messageType is serialized by alias."""
        msg = Message(code="c", message_type=MessageType.ERROR, text="t")
        assert msg.model_dump(by_alias=True)["messageType"] == MessageType.ERROR

    def test_result_wraps_messages(self) -> None:
        result = Result(messages=[Message(code="c", messageType=MessageType.WARNING, text="t")])
        assert result.messages[0].message_type == MessageType.WARNING


class TestErrorResponse:
    """Test the standard error body."""

    def test_body_shape(self) -> None:
        """Body carries one message with code, type, text and timestamp."""
        response = error_response(404, "store.kid.get.missing.app_error", "Kid not found")

        assert response.status_code == 404
        message = body_of(response)["messages"][0]
        assert message["code"] == "store.kid.get.missing.app_error"
        assert message["messageType"] == "Error"
        assert message["text"] == "Kid not found"
        assert message["timestamp"]


class TestHandlers:
    """Test the exception handlers."""

    async def test_not_found(self) -> None:
        response = await app_error_handler(make_request(), NotFoundError("Kid", "k1"))

        assert response.status_code == 404
        assert body_of(response)["messages"][0]["code"] == "store.kid.get.missing.app_error"

    async def test_forbidden(self) -> None:
        response = await app_error_handler(make_request(), ForbiddenError("view_kid"))

        assert response.status_code == 403
        assert "view_kid" in body_of(response)["messages"][0]["text"]

    async def test_conflict(self) -> None:
        response = await app_error_handler(make_request(), ConflictError("Emoji", "smile"))
        assert response.status_code == 409

    async def test_store_error_is_exception_type(self) -> None:
        """Server side failures are reported as Exception messages."""
        error = StoreError(code="store.kid.app_error", text="Unable to access Kid")
        response = await app_error_handler(make_request(), error)

        assert response.status_code == 500
        assert body_of(response)["messages"][0]["messageType"] == "Exception"

    async def test_generic_hides_details(self) -> None:
        response = await generic_exception_handler(make_request(), RuntimeError("secret"))

        assert response.status_code == 500
        message = body_of(response)["messages"][0]
        assert message["code"] == "api.context.internal_server_error.app_error"
        assert "secret" not in message["text"]
