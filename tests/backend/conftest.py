import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.pop("ADMIN_PASSWORD", None)

from tortoise import Tortoise  # noqa: E402

from newsreader.core import db as db_module  # noqa: E402
from newsreader.core.sessions import session_store  # noqa: E402
from newsreader.main import app  # noqa: E402
from newsreader.models.user import User  # noqa: E402
from newsreader.services.accounts import create_account  # noqa: E402

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


def _transport() -> ASGITransport:
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        return ASGITransport(app=app, lifespan="off")
    except TypeError:
        return ASGITransport(app=app)


@pytest_asyncio.fixture
async def db():
    """
    Fresh database and empty session store, without an HTTP client.
    """
    await _init_test_db()
    session_store.clear()
    yield
    session_store.clear()
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    Redirects are not followed, so tests can assert on 302 + Location.
    """
    async with AsyncClient(transport=_transport(), base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def make_client(db):
    """
    Factory for extra clients, each with its own cookie jar (i.e. its own session).
    """
    clients = []

    async def _make_client() -> AsyncClient:
        c = AsyncClient(transport=_transport(), base_url="http://testserver")
        clients.append(c)
        return c

    yield _make_client
    for c in clients:
        await c.aclose()


@pytest_asyncio.fixture
async def create_admin(db):
    """
    Factory fixture to create admin accounts (with profiles) directly.
    """

    async def _create_admin(password: str = "AdminPass!23") -> tuple[User, str]:
        user = await create_account(f"admin_{uuid.uuid4().hex[:6]}", password, {}, is_admin=True)
        return user, password

    return _create_admin


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create regular accounts (with profiles) directly.
    """

    async def _create_user(password: str = "UserPass!23", username: str | None = None, **profile) -> tuple[User, str]:
        user = await create_account(username or f"user_{uuid.uuid4().hex[:6]}", password, profile)
        return user, password

    return _create_user


@pytest.fixture
def login():
    """
    Helper fixture that logs a client in through the login form.
    """

    async def _login(client: AsyncClient, username: str, password: str) -> None:
        resp = await client.post("/login", data={"username": username, "password": password})
        assert resp.status_code == 302, resp.text
        assert resp.headers["location"] == "/"

    return _login
