import os
import tempfile

# Configuration de test, avant tout import de bottin (settings lus à l'import)
TEST_DIR = tempfile.mkdtemp(prefix="bottin-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DIR}/test.db"
os.environ["DB_NULL_POOL"] = "true"
os.environ["APP_ENV"] = "test"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STATIC_DIR"] = os.path.join(TEST_DIR, "static")
os.environ["MAIL_SERVER"] = ""
os.environ["ALLOW_FALLBACK_STORAGE"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient

from bottin.auth.models import User
from bottin.auth.password import hash_password
from bottin.db.models import Base
from bottin.db.session import AsyncSessionLocal, engine
from bottin.main import create_app

PASSWORD = "secret123"
# bcrypt est lent: un seul hash pour tous les utilisateurs de test
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
async def clients(app):
    """Fabrique de clients HTTP, chacun avec ses propres cookies."""
    opened = []

    def factory():
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")
        opened.append(client)
        return client

    yield factory

    for client in opened:
        await client.aclose()


@pytest.fixture
def client(clients):
    return clients()


@pytest.fixture
def create_user():
    counter = {"n": 0}

    async def _create(username=None, **fields):
        counter["n"] += 1
        username = username or f"artist{counter['n']}"
        values = {
            "email": f"{username}@example.com",
            "first_name": username.capitalize(),
            "last_name": "Test",
            "password": PASSWORD_HASH,
            "is_approved": True,
            "is_admin": False,
        }
        values.update(fields)
        async with AsyncSessionLocal() as db:
            user = User(username=username, **values)
            db.add(user)
            await db.commit()
            return user

    return _create


@pytest.fixture
def login_as(clients):
    async def _login(user, password=PASSWORD):
        client = clients()
        response = await client.post(
            "/api/auth/login", json={"username": user.username, "password": password}
        )
        assert response.status_code == 200, response.text
        return client

    return _login


@pytest.fixture
async def admin(create_user):
    return await create_user("admin", is_admin=True)
