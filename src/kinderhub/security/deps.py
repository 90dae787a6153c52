"""FastAPI security dependencies for kinderhub.

Provides the injectable ``get_current_session`` dependency:
- With OIDC configured, a valid ``Authorization: Bearer`` token is required
- Without OIDC, authentication is disabled and every request runs as an
  anonymous system administrator

Usage:
    @router.get("/kids/{kid_id}")
    async def get_kid(kid_id: str, session: Session = Depends(get_current_session)):
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Header, Request

from kinderhub.errors import UnauthorizedError
from kinderhub.model import Session
from kinderhub.observability.logging import user_id_var
from kinderhub.security.oidc import InvalidTokenError, get_token_validator
from kinderhub.security.rbac import RoleName

ANONYMOUS_USER_ID = "anonymous"


def anonymous_session() -> Session:
    """Session used when authentication is disabled."""
    return Session(
        user_id=ANONYMOUS_USER_ID,
        roles=[RoleName.SYSTEM_ADMIN.value],
        is_anonymous=True,
    )


async def get_current_session(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> Session:
    """Extract and validate the caller's session from the Authorization header.

    Raises UnauthorizedError if OIDC is configured and the token is missing
    or invalid.
    """
    validator = get_token_validator()

    if validator is None:
        session = anonymous_session()
    else:
        if authorization is None:
            raise UnauthorizedError("Authentication required", where="get_current_session")

        if not authorization.startswith("Bearer "):
            raise UnauthorizedError(
                "Invalid authorization header format", where="get_current_session"
            )

        token = authorization[7:]  # Remove "Bearer " prefix

        try:
            session = await validator.validate_token(token)
        except InvalidTokenError as e:
            raise UnauthorizedError(str(e), where="get_current_session") from e

    request.state.session = session
    user_id_var.set(session.user_id)
    return session
