"""
Shared fixtures: every test gets its own SQLite database and signing secret.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from login_web.auth.jwt import TokenIssuer
from login_web.auth.password import PasswordHasher
from login_web.auth.store import CredentialStore
from login_web.auth.users import AuthService
from login_web.base_service import create_engine, create_session_factory, create_tables
from login_web.config import Settings
from login_web.main import create_app

TEST_SECRET = "test-signing-secret-0123456789abcdef"


@pytest.fixture
def secret():
    return TEST_SECRET


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'users.db'}"


@pytest.fixture
def settings(database_url, secret):
    return Settings(
        database_url=database_url,
        jwt_secret_key=secret,
        bcrypt_rounds=4,
        log_level="DEBUG",
    )


@pytest_asyncio.fixture
async def engine(database_url):
    engine = create_engine(database_url)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine):
    return CredentialStore(create_session_factory(engine))


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer(secret):
    return TokenIssuer(secret=secret)


@pytest.fixture
def service(store, hasher, issuer):
    return AuthService(store=store, hasher=hasher, issuer=issuer)


@pytest_asyncio.fixture
async def app(settings):
    app = create_app(settings)
    await create_tables(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        yield ac
