from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from jose import JWTError
from jose.exceptions import ExpiredSignatureError

from kinderhub.errors import UnauthorizedError
from kinderhub.model import Session
from kinderhub.security.deps import ANONYMOUS_USER_ID, anonymous_session, get_current_session
from kinderhub.security.oidc import InvalidTokenError, OIDCConfig, TokenValidator
from kinderhub.security.rbac import RoleName


def make_validator(**kwargs: object) -> TokenValidator:
    return TokenValidator(OIDCConfig(issuer="https://issuer", audience="kinderhub", **kwargs))


@pytest.fixture
def no_jwks(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_get_jwks(self: TokenValidator) -> dict[str, object]:
        return {"keys": []}

    monkeypatch.setattr(TokenValidator, "_get_jwks", fake_get_jwks)


def test_jwks_uri_defaults_to_issuer() -> None:
    config = OIDCConfig(issuer="https://issuer/", audience="kinderhub")
    assert config.jwks_uri == "https://issuer/.well-known/jwks.json"


async def test_validate_token_returns_session(monkeypatch: pytest.MonkeyPatch, no_jwks: None) -> None:
    def fake_decode(*_args: object, **_kwargs: object) -> dict[str, object]:
        return {"sub": "u1", "roles": "system_user school_admin"}

    monkeypatch.setattr("kinderhub.security.oidc.jwt.decode", fake_decode)

    session = await make_validator().validate_token("token")

    assert session == Session(user_id="u1", roles=["school_admin", "system_user"])
    assert not session.is_anonymous


async def test_validate_token_without_subject(monkeypatch: pytest.MonkeyPatch, no_jwks: None) -> None:
    monkeypatch.setattr("kinderhub.security.oidc.jwt.decode", lambda *_a, **_k: {"roles": []})

    with pytest.raises(InvalidTokenError, match="subject"):
        await make_validator().validate_token("token")


async def test_validate_token_expired(monkeypatch: pytest.MonkeyPatch, no_jwks: None) -> None:
    def fake_decode(*_args: object, **_kwargs: object) -> object:
        raise ExpiredSignatureError("expired")

    monkeypatch.setattr("kinderhub.security.oidc.jwt.decode", fake_decode)

    with pytest.raises(InvalidTokenError, match="expired"):
        await make_validator().validate_token("token")


async def test_validate_token_invalid(monkeypatch: pytest.MonkeyPatch, no_jwks: None) -> None:
    def fake_decode(*_args: object, **_kwargs: object) -> object:
        raise JWTError("bad signature")

    monkeypatch.setattr("kinderhub.security.oidc.jwt.decode", fake_decode)

    with pytest.raises(InvalidTokenError, match="Invalid token"):
        await make_validator().validate_token("token")


def test_extract_roles_from_claims() -> None:
    validator = make_validator(client_id="kinderhub")
    payload = {
        "roles": ["school_parent", "system_user"],
        "realm_access": {"roles": ["system_admin"]},
        "resource_access": {"kinderhub": {"roles": ["school_teacher"]}},
    }

    roles = validator._extract_roles(payload)
    assert roles == ["school_parent", "school_teacher", "system_admin", "system_user"]


class FakeResponse:
    def __init__(self, payload: dict[str, object]) -> None:
        self._payload = payload

    def raise_for_status(self) -> None:
        return None

    def json(self) -> dict[str, object]:
        return self._payload


async def test_get_jwks_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    validator = make_validator(jwks_cache_seconds=3600)
    calls: dict[str, int] = {"count": 0}

    class FakeClient:
        async def __aenter__(self) -> "FakeClient":
            return self

        async def __aexit__(self, _exc_type: object, _exc: object, _tb: object) -> None:
            return None

        async def get(self, *_args: object, **_kwargs: object) -> FakeResponse:
            calls["count"] += 1
            return FakeResponse({"keys": ["k1"]})

    monkeypatch.setattr("kinderhub.security.oidc.httpx.AsyncClient", FakeClient)

    first = await validator._get_jwks()
    second = await validator._get_jwks()

    assert first == second == {"keys": ["k1"]}
    assert calls["count"] == 1


class FailingClient:
    async def __aenter__(self) -> "FailingClient":
        return self

    async def __aexit__(self, _exc_type: object, _exc: object, _tb: object) -> None:
        return None

    async def get(self, *_args: object, **_kwargs: object) -> object:
        raise RuntimeError("network down")


async def test_get_jwks_fallback_to_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    validator = make_validator(jwks_cache_seconds=1)
    validator._jwks = {"keys": ["cached"]}
    validator._jwks_fetched_at = datetime.now(timezone.utc) - timedelta(seconds=120)

    monkeypatch.setattr("kinderhub.security.oidc.httpx.AsyncClient", FailingClient)

    assert await validator._get_jwks() == {"keys": ["cached"]}


async def test_get_jwks_failure_without_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("kinderhub.security.oidc.httpx.AsyncClient", FailingClient)

    with pytest.raises(InvalidTokenError, match="JWKS"):
        await make_validator()._get_jwks()


class TestCurrentSession:
    """Test the get_current_session dependency."""

    @staticmethod
    def make_request() -> SimpleNamespace:
        return SimpleNamespace(state=SimpleNamespace())

    def test_anonymous_session(self) -> None:
        session = anonymous_session()

        assert session.user_id == ANONYMOUS_USER_ID
        assert session.roles == [RoleName.SYSTEM_ADMIN.value]
        assert session.is_anonymous

    async def test_oidc_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("kinderhub.security.deps.get_token_validator", lambda: None)
        request = self.make_request()

        session = await get_current_session(request, None)

        assert session.is_anonymous
        assert request.state.session is session

    async def test_missing_header(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("kinderhub.security.deps.get_token_validator", make_validator)

        with pytest.raises(UnauthorizedError):
            await get_current_session(self.make_request(), None)

    async def test_not_bearer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("kinderhub.security.deps.get_token_validator", make_validator)

        with pytest.raises(UnauthorizedError):
            await get_current_session(self.make_request(), "Basic abc")

    async def test_valid_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        class FakeValidator:
            async def validate_token(self, token: str) -> Session:
                assert token == "abc"
                return Session(user_id="u1")

        monkeypatch.setattr("kinderhub.security.deps.get_token_validator", FakeValidator)

        session = await get_current_session(self.make_request(), "Bearer abc")

        assert session.user_id == "u1"

    async def test_invalid_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        class FakeValidator:
            async def validate_token(self, token: str) -> Session:
                raise InvalidTokenError("Token has expired")

        monkeypatch.setattr("kinderhub.security.deps.get_token_validator", FakeValidator)

        with pytest.raises(UnauthorizedError):
            await get_current_session(self.make_request(), "Bearer abc")
