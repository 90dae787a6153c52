"""Shared FastAPI dependencies for kinderhub routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from kinderhub.errors import BadRequestError
from kinderhub.model import Session
from kinderhub.security.deps import get_current_session
from kinderhub.services import App


def get_app(request: Request) -> App:
    """The ``App`` built at startup."""
    return request.app.state.kinderhub


AppDep = Annotated[App, Depends(get_app)]
SessionDep = Annotated[Session, Depends(get_current_session)]


def require_matching_id(path_id: str, body_id: str, name: str) -> None:
    """Reject a PUT whose body id differs from the id in the path."""
    if path_id != body_id:
        raise BadRequestError(
            code="api.context.invalid_body_param.app_error",
            text=f"Invalid or missing {name} in request body",
            where="require_matching_id",
            detail=f"path={path_id} body={body_id}",
        )
