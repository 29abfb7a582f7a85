import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from core.audit import AuditLog
from core.db import Database
from main import create_app


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "data": {"status": "ok"}, "error": None}


@pytest.mark.asyncio
async def test_ready_with_database(client):
    resp = await client.get("/ready")
    assert resp.status_code == 200
    assert resp.json()["data"] == {"ready": True}


@pytest.mark.asyncio
async def test_ready_without_database(tmp_path):
    app = create_app(Settings(
        MYSQL_ASYNC_URL=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nested' / 'users.db'}",
        AUDIT_LOG_PATH=str(tmp_path / "audit.log"),
    ))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        resp = await ac.get("/ready")
    await app.state.database.dispose()
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "db_unreachable"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    resp = await client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["ok"] is False


@pytest.mark.asyncio
async def test_static_stylesheet(client):
    resp = await client.get("/static/style.css")
    assert resp.status_code == 200
    assert ".mensagem.sucesso" in resp.text


@pytest.mark.asyncio
async def test_engine_is_memoized(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    assert database.engine is database.engine
    await database.connect()
    await database.dispose()


@pytest.mark.asyncio
async def test_connection_failure_is_fatal(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nested' / 'users.db'}")
    with pytest.raises(SystemExit) as excinfo:
        await database.connect()
    assert "Database connection error" in str(excinfo.value)
    await database.dispose()


def test_audit_log_appends(tmp_path):
    path = tmp_path / "logs" / "audit.log"
    audit = AuditLog(str(path))
    audit.record("INSERT", "users", 1, "10.0.0.1", "a@b.com")
    audit.record("DELETE", "users", 1)
    audit.close()

    # a new instance keeps appending to the same file
    audit = AuditLog(str(path))
    audit.record("UPDATE", "users", 2, "10.0.0.2")
    audit.close()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert lines[0].endswith("[10.0.0.1] INSERT on users (ID: 1) - a@b.com")
    assert "[N/A] DELETE on users (ID: 1)" in lines[1]
    assert "[10.0.0.2] UPDATE on users (ID: 2)" in lines[2]


def test_settings_read_dotenv(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TIMEZONE", raising=False)
    (tmp_path / ".env").write_text("TIMEZONE=UTC\n", encoding="utf-8")
    assert Settings.model_config["env_file"] == ".env"
    assert Settings().TIMEZONE == "UTC"
