"""OIDC token validation for kinderhub.

Validates JWT tokens from OIDC providers (Keycloak, Auth0, Azure AD, etc.):
- JWT signature verification with JWKS
- Token expiry validation
- Issuer and audience validation
- Role extraction from claims

The ``sub`` claim is the kinderhub user id of the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from kinderhub.config import settings
from kinderhub.model import Session

logger = logging.getLogger(__name__)


@dataclass
class OIDCConfig:
    """OIDC provider configuration."""

    issuer: str
    audience: str
    jwks_uri: str | None = None
    roles_claim: str = "roles"
    client_id: str | None = None
    jwks_cache_seconds: int = 3600

    def __post_init__(self) -> None:
        """Set JWKS URI from issuer if not provided."""
        if self.jwks_uri is None:
            self.jwks_uri = f"{self.issuer.rstrip('/')}/.well-known/jwks.json"


class InvalidTokenError(Exception):
    """Raised when token validation fails."""

    pass


class TokenValidator:
    """Validates JWT tokens from OIDC provider."""

    def __init__(self, config: OIDCConfig):
        self.config = config
        self._jwks: dict[str, Any] | None = None
        self._jwks_fetched_at: datetime | None = None

    async def validate_token(self, token: str) -> Session:
        """Validate a JWT access token and return the caller's session.

        Raises:
            InvalidTokenError: If token is invalid
        """
        jwks = await self._get_jwks()

        try:
            payload = jwt.decode(
                token,
                jwks,
                algorithms=["RS256", "ES256"],
                audience=self.config.audience,
                issuer=self.config.issuer,
                options={"verify_exp": True},
            )
        except ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except JWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        subject = payload.get("sub")
        if not subject:
            raise InvalidTokenError("Token has no subject")

        return Session(user_id=subject, roles=self._extract_roles(payload))

    def _extract_roles(self, payload: dict[str, Any]) -> list[str]:
        """Extract roles from token claims."""
        roles: list[str] = []

        claim_value = payload.get(self.config.roles_claim)
        if isinstance(claim_value, list):
            roles.extend(claim_value)
        elif isinstance(claim_value, str):
            roles.extend(claim_value.split())

        # Keycloak realm roles
        realm_access = payload.get("realm_access", {})
        if isinstance(realm_access, dict):
            realm_roles = realm_access.get("roles", [])
            if isinstance(realm_roles, list):
                roles.extend(realm_roles)

        # Keycloak client roles
        if self.config.client_id:
            resource_access = payload.get("resource_access", {})
            client_access = resource_access.get(self.config.client_id, {})
            if isinstance(client_access, dict):
                client_roles = client_access.get("roles", [])
                if isinstance(client_roles, list):
                    roles.extend(client_roles)

        return sorted(set(roles))

    async def _get_jwks(self) -> dict[str, Any]:
        """Get JWKS keys, with caching."""
        now = datetime.now(UTC)
        if self._jwks is not None and self._jwks_fetched_at is not None:
            age = (now - self._jwks_fetched_at).total_seconds()
            if age < self.config.jwks_cache_seconds:
                return self._jwks

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    self.config.jwks_uri,  # type: ignore
                    timeout=10.0,
                )
                response.raise_for_status()
                self._jwks = response.json()
                self._jwks_fetched_at = now
                logger.info(f"Fetched JWKS from {self.config.jwks_uri}")
                return self._jwks
        except Exception as e:
            if self._jwks is not None:
                logger.warning(f"Failed to refresh JWKS, using cached: {e}")
                return self._jwks
            raise InvalidTokenError(f"Failed to fetch JWKS: {e}") from e


# Global validator instance (configured lazily)
_validator: TokenValidator | None = None


def get_token_validator() -> TokenValidator | None:
    """Get the global token validator.

    Returns None if OIDC is not configured.
    """
    global _validator

    if not settings.oidc_issuer:
        return None

    if _validator is None:
        config = OIDCConfig(
            issuer=settings.oidc_issuer,
            audience=settings.oidc_audience or settings.app_name,
            roles_claim=settings.oidc_roles_claim or "roles",
            client_id=settings.oidc_client_id,
            jwks_cache_seconds=settings.oidc_jwks_cache_seconds,
        )
        _validator = TokenValidator(config)

    return _validator
