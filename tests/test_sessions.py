from datetime import datetime, timedelta

import pytest

from bottin.auth import jwt_handler
from bottin.auth.sessions import DatabaseSessionStore, MemorySessionStore, SessionStore, build_session_store
from bottin.config import Settings


async def test_memory_store_create_get_destroy():
    store = MemorySessionStore(timedelta(days=7))

    record = await store.create(user_id=3, is_admin=True)
    fetched = await store.get(record.id)
    assert fetched.user_id == 3
    assert fetched.is_admin is True

    await store.destroy(record.id)
    assert await store.get(record.id) is None


async def test_memory_store_expired_session():
    store = MemorySessionStore(timedelta(seconds=-1))

    record = await store.create(user_id=1, is_admin=False)
    assert await store.get(record.id) is None


async def test_database_store_persists_sessions(create_user):
    user = await create_user("jean")
    store = DatabaseSessionStore(timedelta(days=7))

    record = await store.create(user_id=user.id, is_admin=False)

    # Une autre instance (autre processus) retrouve la session
    other = DatabaseSessionStore(timedelta(days=7))
    fetched = await other.get(record.id)
    assert fetched.user_id == user.id
    assert fetched.expires_at > datetime.utcnow()

    await other.destroy(record.id)
    assert await store.get(record.id) is None


async def test_database_store_ignores_expired(create_user):
    user = await create_user("jean")
    store = DatabaseSessionStore(timedelta(seconds=-1))

    record = await store.create(user_id=user.id, is_admin=False)
    assert await store.get(record.id) is None


@pytest.mark.parametrize(
    "env, backend, expected",
    [
        ("development", None, MemorySessionStore),
        ("production", None, DatabaseSessionStore),
        ("production", "memory", MemorySessionStore),
        ("development", "database", DatabaseSessionStore),
    ],
)
def test_build_session_store(env, backend, expected, monkeypatch):
    monkeypatch.delenv("SESSION_BACKEND", raising=False)
    options = {"SESSION_BACKEND": backend} if backend else {}
    config = Settings(DATABASE_URL="sqlite+aiosqlite://", APP_ENV=env, **options)
    assert isinstance(build_session_store(config), expected)


def test_build_session_store_unknown_backend():
    config = Settings(DATABASE_URL="sqlite+aiosqlite://", SESSION_BACKEND="redis")
    with pytest.raises(ValueError):
        build_session_store(config)


def test_session_token_round_trip_and_purpose():
    token = jwt_handler.create_session_token("abc-123")
    assert jwt_handler.decode_session_token(token) == "abc-123"

    # Un token de réinitialisation n'ouvre pas de session
    reset_token = jwt_handler.create_password_reset_token(5, "fingerprint")
    assert jwt_handler.decode_session_token(reset_token) is None
    assert jwt_handler.decode_password_reset_token(token) is None
    assert jwt_handler.decode_session_token(token + "x") is None


def test_incomplete_session_store_cannot_be_instantiated():
    class WriteOnlyStore(SessionStore):
        async def _save(self, record):
            pass

    with pytest.raises(TypeError):
        WriteOnlyStore(timedelta(days=1))
