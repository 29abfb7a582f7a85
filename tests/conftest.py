import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# Ensure project root is on sys.path so `api.*`, `core.*` imports work
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


# Explicitly enable pytest-asyncio plugin for async tests/fixtures
pytest_plugins = ("pytest_asyncio",)


from config.settings import Settings
from main import create_app


@pytest.fixture()
def test_settings(tmp_path):
    """Settings pointing at a throwaway SQLite file and audit log."""
    return Settings(
        MYSQL_ASYNC_URL=f"sqlite+aiosqlite:///{tmp_path / 'users.db'}",
        AUDIT_LOG_PATH=str(tmp_path / "logs" / "audit.log"),
        CREATE_TABLES_ON_STARTUP=True,
        DEBUG=False,
    )


@pytest_asyncio.fixture()
async def app(test_settings):
    """App with its users table created; lifespan is not run by ASGITransport."""
    application = create_app(test_settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()
    application.state.audit.close()


@pytest_asyncio.fixture()
async def client(app):
    """Async test client for the user page, served in-memory."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture()
async def session(app):
    async with app.state.database.session_maker() as s:
        yield s
