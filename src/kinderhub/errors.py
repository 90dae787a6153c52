"""Domain errors raised by the model, store and service layers.

Every error carries the HTTP status the API layer answers with, a stable
machine-readable code and a human readable text. The API exception handlers
in ``kinderhub.api.errors`` turn them into the standard error body.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for all application errors."""

    status_code: int = 500

    def __init__(
        self,
        code: str,
        text: str,
        *,
        where: str | None = None,
        detail: str | None = None,
        status_code: int | None = None,
    ):
        self.code = code
        self.text = text
        self.where = where
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(text)

    def __str__(self) -> str:
        parts = [self.text]
        if self.where:
            parts.insert(0, f"{self.where}:")
        if self.detail:
            parts.append(f"({self.detail})")
        return " ".join(parts)


class BadRequestError(AppError):
    """Invalid input (400)."""

    status_code = 400


class ForbiddenError(AppError):
    """Missing permission (403)."""

    status_code = 403

    def __init__(self, permission: str, *, where: str | None = None):
        super().__init__(
            code="api.context.permissions.app_error",
            text=f"You do not have the appropriate permissions: {permission}",
            where=where,
        )
        self.permission = permission


class NotFoundError(AppError):
    """Resource not found (404)."""

    status_code = 404

    def __init__(self, resource_type: str, identifier: str, *, where: str | None = None):
        super().__init__(
            code=f"store.{resource_type.lower()}.get.missing.app_error",
            text=f"{resource_type} with identifier '{identifier}' not found",
            where=where,
        )
        self.resource_type = resource_type
        self.identifier = identifier


class ConflictError(AppError):
    """Resource already exists (409)."""

    status_code = 409

    def __init__(self, resource_type: str, identifier: str, *, where: str | None = None):
        super().__init__(
            code=f"store.{resource_type.lower()}.save.exists.app_error",
            text=f"{resource_type} with identifier '{identifier}' already exists",
            where=where,
        )


class StoreError(AppError):
    """Unexpected storage failure (500)."""

    status_code = 500


class UnauthorizedError(AppError):
    """Missing or invalid credentials (401)."""

    status_code = 401

    def __init__(self, text: str, *, where: str | None = None):
        super().__init__(code="api.context.session_expired.app_error", text=text, where=where)
