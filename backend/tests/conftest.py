"""
Cookbook Services — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the whole suite.
How:   - An in-memory SQLite database (aiosqlite + StaticPool) replaces
         PostgreSQL; tables are created from ``Base.metadata`` per test.
       - Tokens are minted with a throwaway RSA key and verified through a
         fake JWKS client, so no identity provider is needed.
       - Apps are driven through httpx's ASGITransport.

Fixture Hierarchy:
    Session-scoped:
    └── rsa_private_key: signing key for test tokens

    Function-scoped:
    ├── db_engine / session_factory / db_session: fresh SQLite database
    ├── mock_repository: AsyncMock repository for service unit tests
    ├── authenticator / make_token / admin_headers: auth helpers
    └── recipe_client / metadata_client: HTTP clients against real apps
"""

import os
import time
from types import SimpleNamespace
from typing import AsyncGenerator
from unittest.mock import AsyncMock

# Settings are read at import time by cookbook.database; keep tests away from
# any real config file and database.
os.environ["COOKBOOK_CONFIG_FILE"] = "/nonexistent/cookbook-test-config.yaml"
os.environ["COOKBOOK_DATABASE__URL"] = "sqlite+aiosqlite://"
os.environ["COOKBOOK_GLOBAL_SETTINGS__LOG_LEVEL"] = "WARNING"

import jwt  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from cryptography.hazmat.primitives.asymmetric import rsa  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from cookbook.auth import ADMINISTRATOR_ROLE, OidcAuthenticator  # noqa: E402
from cookbook.config import OauthConfig, Settings  # noqa: E402
from cookbook.database import Base, get_db_session  # noqa: E402
import cookbook.models  # noqa: E402,F401


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def session_override(session_factory):
    """Replacement for get_db_session bound to the test database."""

    async def override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override


@pytest.fixture
def mock_repository():
    """AsyncMock standing in for a SqlAlchemyRepository."""
    repository = AsyncMock()
    repository.find_all = AsyncMock()
    repository.find_single = AsyncMock()
    repository.create = AsyncMock()
    repository.update = AsyncMock()
    repository.delete = AsyncMock()
    return repository


# ══════════════════════════════════════════════════════════════════════════
# Authentication
# ══════════════════════════════════════════════════════════════════════════

class FakeJWKClient:
    """Serves one public key for every token, like a single-key JWKS."""

    def __init__(self, public_key):
        self.public_key = public_key
        self.calls = 0

    def get_signing_key_from_jwt(self, token: str):
        self.calls += 1
        return SimpleNamespace(key=self.public_key)


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def oauth_config():
    return OauthConfig(
        service="recipe-service",
        url="https://id.example.com",
        realm="cookbook",
    )


@pytest.fixture
def jwks_client(rsa_private_key):
    return FakeJWKClient(rsa_private_key.public_key())


@pytest.fixture
def authenticator(oauth_config, jwks_client):
    return OidcAuthenticator(oauth_config, jwks_client=jwks_client)


@pytest.fixture
def make_token(rsa_private_key, oauth_config):
    """
    Mint an RS256 access token shaped like a Keycloak token.

    Usage:
        token = make_token(roles=["administrator"])
        token = make_token(expires_in=-60)          # expired
        token = make_token(issuer="https://evil")   # wrong issuer
    """

    def _make(
        sub: str = "user-1",
        roles=(ADMINISTRATOR_ROLE,),
        client_roles=(),
        expires_in: int = 300,
        issuer: str = None,
        key=None,
    ) -> str:
        now = int(time.time())
        claims = {
            "sub": sub,
            "iss": issuer or oauth_config.issuer,
            "iat": now,
            "exp": now + expires_in,
            "preferred_username": "chef",
            "email": "chef@example.com",
            "realm_access": {"roles": list(roles)},
            "resource_access": {oauth_config.service: {"roles": list(client_roles)}},
        }
        return jwt.encode(claims, key or rsa_private_key, algorithm="RS256")

    return _make


@pytest.fixture
def admin_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


# ══════════════════════════════════════════════════════════════════════════
# Applications
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(oauth_config):
    return Settings(oauth=oauth_config)


async def _client_for(app, session_override) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_db_session] = session_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def recipe_client(test_settings, authenticator, session_override):
    """HTTP client for the recipe service on the test database."""
    from cookbook.main import create_recipe_app

    app = create_recipe_app(settings=test_settings, authenticator=authenticator)
    async for client in _client_for(app, session_override):
        yield client


@pytest_asyncio.fixture
async def metadata_client(test_settings, authenticator, session_override):
    """HTTP client for the metadata service on the test database."""
    from cookbook.main import create_metadata_app

    app = create_metadata_app(settings=test_settings, authenticator=authenticator)
    async for client in _client_for(app, session_override):
        yield client
