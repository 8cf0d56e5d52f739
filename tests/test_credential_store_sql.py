from datetime import datetime, timedelta, timezone

import pytest

from backoffice.application.ports.credential_store import RegistrationData
from backoffice.db.models import Admin
from backoffice.exceptions import DuplicateAccount
from backoffice.infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import (
    SqlCredentialStore,
    build_password_context,
)
from backoffice.utils import hash_token

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(session):
    return SqlCredentialStore(session, pwd_context=build_password_context(4), otp_expiry_minutes=5, clock=lambda: NOW)


def _registration(email="carol@example.com"):
    return RegistrationData(first_name="Carol", last_name="Lee", email=email, password="secret123", phone="+15551234567")


def test_create_hashes_password_and_sets_otp(store, session):
    account = store.create(_registration())
    row = session.get(Admin, account.id)
    assert row.password != "secret123"
    assert row.password.startswith("$2")
    assert account.is_verified is False
    assert len(account.otp_code) == 6 and account.otp_code.isdigit()
    assert account.otp_expiry == NOW + timedelta(minutes=5)


def test_create_duplicate_email_case_insensitive(store):
    store.create(_registration())
    with pytest.raises(DuplicateAccount):
        store.create(_registration(email="CAROL@example.com"))


def test_find_by_email_normalizes(store):
    store.create(_registration())
    assert store.find_by_email(" Carol@Example.com ") is not None
    assert store.find_by_email("nobody@example.com") is None


def test_verify_password(store):
    store.create(_registration())
    assert store.verify_password("carol@example.com", "secret123") is not None
    assert store.verify_password("carol@example.com", "wrong") is None
    assert store.verify_password("ghost@example.com", "secret123") is None


def test_update_rejects_unknown_fields(store):
    account = store.create(_registration())
    with pytest.raises(ValueError):
        store.update(account.id, password="plain")
    assert store.update(9999, is_verified=True) is None


def test_find_by_reset_token_matches_digest(store):
    account = store.create(_registration())
    store.update(account.id, reset_token=hash_token("raw-token"), reset_token_expiry=NOW)
    assert store.find_by_reset_token("raw-token").id == account.id
    assert store.find_by_reset_token(hash_token("raw-token")) is None
    assert store.find_by_reset_token("") is None


def test_set_password_consumes_reset_token(store):
    account = store.create(_registration())
    store.update(account.id, reset_token=hash_token("raw-token"), reset_token_expiry=NOW)
    updated = store.set_password(account.id, "newpass456")
    assert updated.reset_token is None
    assert updated.reset_token_expiry is None
    assert store.verify_password("carol@example.com", "newpass456") is not None


def test_delete(store):
    account = store.create(_registration())
    assert store.delete(account.id) is True
    assert store.find_by_id(account.id) is None
    assert store.delete(account.id) is False


def test_datetime_columns_are_timezone_aware():
    for column in ("otp_expiry", "reset_token_expiry", "created_at"):
        assert Admin.__table__.c[column].type.timezone is True


def test_stored_datetimes_read_back_as_utc(store):
    store.create(_registration())
    account = store.find_by_email("carol@example.com")
    assert account.otp_expiry.tzinfo is not None
    assert account.otp_expiry.utcoffset() == timedelta(0)
    assert account.created_at.tzinfo is not None
    assert account.otp_expiry > NOW
