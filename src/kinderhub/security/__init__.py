"""Security module for kinderhub.

Provides authentication and authorization:
- OIDC/JWT token validation
- Built-in roles and permissions
- FastAPI session dependency
"""

from kinderhub.security.deps import ANONYMOUS_USER_ID, anonymous_session, get_current_session
from kinderhub.security.oidc import InvalidTokenError, OIDCConfig, TokenValidator
from kinderhub.security.rbac import Permission, RoleName, default_roles, permissions_of

__all__ = [
    "ANONYMOUS_USER_ID",
    "InvalidTokenError",
    "OIDCConfig",
    "Permission",
    "RoleName",
    "TokenValidator",
    "anonymous_session",
    "default_roles",
    "get_current_session",
    "permissions_of",
]
