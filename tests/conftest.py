import os
import tempfile
from pathlib import Path

import pytest
from cryptography.fernet import Fernet

from tests.helpers import (
    ADMIN_PASSWORD,
    CREATE_APP,
    MINT_PUBLIC_KEY,
    USER_PASSWORD,
    graphql,
    login,
    next_app_index,
)

# Settings are read at import time, so the environment must be ready first
_DB_DIR = Path(tempfile.mkdtemp(prefix="mogami-test-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}"
os.environ["MOGAMI_SUBSIDIZER_SECRET_KEY"] = "test-subsidizer-secret"
os.environ["MOGAMI_MINT_PUBLIC_KEY"] = MINT_PUBLIC_KEY
os.environ["SOLANA_RPC_ENDPOINT"] = "devnet"
os.environ["NODE_ENV"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = ADMIN_PASSWORD
os.environ["SECRETS_ENCRYPTION_KEY"] = Fernet.generate_key().decode("utf-8")

from fastapi.testclient import TestClient  # noqa: E402

from mogami_api.core.database import AsyncSessionLocal  # noqa: E402
from mogami_api.core.seed import ensure_user  # noqa: E402
from mogami_api.main import app  # noqa: E402
from mogami_api.models import AppUser, AppUserRole  # noqa: E402


async def _create_user(username):
    async with AsyncSessionLocal() as db:
        user = await ensure_user(db, username, USER_PASSWORD)
        await db.commit()
        return user.id


async def _add_member(app_id, user_id):
    async with AsyncSessionLocal() as db:
        db.add(AppUser(app_id=app_id, user_id=user_id, role=AppUserRole.MEMBER))
        await db.commit()


@pytest.fixture(scope="session")
def client():
    # Entering the client runs the lifespan: tables are created and seeded
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="session")
def run(client):
    """Run a coroutine function on the application's event loop"""
    def _run(fn, *args):
        return client.portal.call(fn, *args)
    return _run


@pytest.fixture(scope="session")
def admin_token(client):
    return login(client, "admin", ADMIN_PASSWORD)


@pytest.fixture(scope="session")
def user(client, run):
    user_id = run(_create_user, "alice")
    return {"id": user_id, "token": login(client, "alice", USER_PASSWORD)}


@pytest.fixture(scope="session")
def other_user(client, run):
    user_id = run(_create_user, "bob")
    return {"id": user_id, "token": login(client, "bob", USER_PASSWORD)}


@pytest.fixture
def make_app(client, admin_token):
    """Create an app as admin and return its payload"""
    def _make_app(name="Test App"):
        body = graphql(client, CREATE_APP, {"input": {"index": next_app_index(), "name": name}}, admin_token)
        assert "errors" not in body, body
        return body["data"]["adminCreateApp"]
    return _make_app


@pytest.fixture
def member_app(make_app, run, user):
    """An app the regular user belongs to"""
    created = make_app("Member App")
    run(_add_member, created["id"], user["id"])
    return created
