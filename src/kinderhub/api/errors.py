"""Error responses for the kinderhub API.

Every failure is answered with the same body:

    {"messages": [{"code": ..., "messageType": "Error", "text": ..., "timestamp": ...}]}

``AppError`` subclasses carry their own status and code; request validation
failures become 400 and anything unexpected becomes 500.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from kinderhub.errors import AppError

logger = logging.getLogger(__name__)


class MessageType(str, Enum):
    """Type of message in error response."""

    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"
    EXCEPTION = "Exception"


class Message(BaseModel):
    model_config = {"extra": "forbid", "populate_by_name": True}

    code: str
    message_type: MessageType = Field(alias="messageType")
    text: str
    timestamp: str | None = None


class Result(BaseModel):
    model_config = {"extra": "forbid"}

    messages: list[Message]


def error_response(
    status_code: int,
    code: str,
    text: str,
    message_type: MessageType = MessageType.ERROR,
) -> ORJSONResponse:
    result = Result(
        messages=[
            Message(
                code=code,
                messageType=message_type,
                text=text,
                timestamp=datetime.now(UTC).isoformat(),
            )
        ]
    )
    return ORJSONResponse(status_code=status_code, content=result.model_dump(by_alias=True))


async def app_error_handler(request: Request, exc: AppError) -> ORJSONResponse:
    """Exception handler for domain errors."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        message_type = MessageType.EXCEPTION
    else:
        logger.debug(f"{request.method} {request.url.path} rejected: {exc}")
        message_type = MessageType.ERROR
    return error_response(exc.status_code, exc.code, exc.text, message_type)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """Exception handler for malformed request bodies and parameters."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return error_response(400, "api.context.invalid_body_param.app_error", details or "Invalid request")


async def generic_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Exception handler for unexpected errors."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(
        500,
        "api.context.internal_server_error.app_error",
        "An unexpected error occurred",
        MessageType.EXCEPTION,
    )
