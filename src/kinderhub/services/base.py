"""Shared base of the application services."""

from __future__ import annotations

from kinderhub.errors import ForbiddenError
from kinderhub.model import Session
from kinderhub.persistence.store import Store
from kinderhub.security.rbac import Permission
from kinderhub.services.permissions import PermissionService


class Service:
    """A group of business operations over the store.

    Every operation takes the caller's ``Session`` first and checks the
    caller's permissions before touching the store.
    """

    def __init__(self, store: Store, permissions: PermissionService):
        self.store = store
        self.permissions = permissions

    async def require_self_or(
        self, session: Session, user_id: str, permission: Permission, where: str
    ) -> None:
        """Allow acting on one's own account, or on others with ``permission``."""
        if user_id == session.user_id:
            return
        if not await self.permissions.has_permission(session, permission):
            raise ForbiddenError(permission.value, where=where)
