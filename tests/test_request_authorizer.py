from datetime import datetime, timedelta, timezone

import jwt
import pytest

from backoffice.application.ports.credential_store import RegistrationData
from backoffice.application.services.request_authorizer import RequestAuthorizer
from backoffice.application.services.token_service import TokenService
from backoffice.core.config import Settings
from backoffice.exceptions import Forbidden, Unauthorized
from backoffice.infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import (
    SqlCredentialStore,
    build_password_context,
)


@pytest.fixture
def store(session):
    return SqlCredentialStore(session, pwd_context=build_password_context(4))


@pytest.fixture
def tokens():
    return TokenService(Settings(JWT_SECRET_KEY="authz-secret"))


@pytest.fixture
def account(store):
    return store.create(RegistrationData(first_name="Bob", last_name="Ops", email="bob@example.com", password="secret123"))


def test_missing_token_is_unauthorized(store, tokens):
    with pytest.raises(Unauthorized) as exc:
        RequestAuthorizer(store, tokens).authorize(None)
    assert exc.value.status_code == 401
    assert exc.value.detail == "Access token required"


def test_invalid_token_is_forbidden(store, tokens):
    with pytest.raises(Forbidden) as exc:
        RequestAuthorizer(store, tokens).authorize("garbage")
    assert exc.value.status_code == 403


def test_expired_token_is_forbidden(store, account):
    issued = datetime.now(timezone.utc) - timedelta(days=8)
    settings = Settings(JWT_SECRET_KEY="authz-secret")
    token = TokenService(settings, clock=lambda: issued).issue(account.id)
    with pytest.raises(Forbidden):
        RequestAuthorizer(store, TokenService(settings)).authorize(token)


def test_valid_token_resolves_account(store, tokens, account):
    resolved = RequestAuthorizer(store, tokens).authorize(tokens.issue(account.id))
    assert resolved.id == account.id
    assert resolved.email == "bob@example.com"


def test_deleted_account_loses_access(store, tokens, account):
    token = tokens.issue(account.id)
    store.delete(account.id)
    with pytest.raises(Unauthorized) as exc:
        RequestAuthorizer(store, tokens).authorize(token)
    assert exc.value.detail == "Invalid token"


def test_placeholder_secret_cannot_authorize(store, account, monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
    monkeypatch.delenv("SECRET_KEY", raising=False)
    default_settings = Settings(_env_file=None)
    forged = jwt.encode(
        {"sub": str(account.id), "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        default_settings.SECRET_KEY,
        algorithm="HS256",
    )
    with pytest.raises(Forbidden):
        RequestAuthorizer(store, TokenService(default_settings)).authorize(forged)
