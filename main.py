"""
Main FastAPI application (entrypoint).

Responsibilities:
- Build the Database handle and audit log and attach them to app.state
- Wire the user page router and static files
- Register centralized exception handlers
- Provide middleware: request-id logging
- Add health / readiness endpoints
- Verify DB connectivity (fatal on failure) and create tables on startup
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging
import uvicorn

from api import routes_users
from api.rendering import STATIC_DIR
from config.settings import Settings, settings as default_settings
from core.audit import AuditLog
from core.db import Database
from core.exception_handlers import register_exception_handlers
from core.logging import configure_logging, request_logging_middleware
from core.response import ok, error

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    On startup:
    - Connect to the DB; the process exits if this fails
    - Create the users table (development convenience)
    On shutdown:
    - Dispose the engine and close the audit file
    """
    database: Database = app.state.database
    await database.connect()
    if app.state.settings.CREATE_TABLES_ON_STARTUP:
        await database.create_all()
    yield
    await database.dispose()
    app.state.audit.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.API_TITLE, version=settings.API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = Database(settings.MYSQL_ASYNC_URL, echo=settings.DEBUG)
    app.state.audit = AuditLog(settings.AUDIT_LOG_PATH)

    app.include_router(routes_users.router, tags=["users"])
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # Register centralized exception handlers
    register_exception_handlers(app)

    # Add request logging middleware (adds X-Request-ID header and logs)
    app.middleware("http")(request_logging_middleware)

    # Health endpoints
    @app.get("/health")
    async def health():
        """Simple health endpoint used by load balancers and orchestrators."""
        return ok({"status": "ok"})

    @app.get("/ready")
    async def ready():
        """Readiness: check DB connectivity."""
        if await app.state.database.ping():
            return ok({"ready": True})
        return JSONResponse(status_code=503, content=error(code="db_unreachable", message="DB unavailable"))

    return app


app = create_app()

if __name__ == "__main__":
    # Run with: python main.py for local dev. For production use uvicorn/gunicorn with workers.
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=default_settings.DEBUG)
