"""
Async database engine and session management.

Purpose:
- Own one lazily created SQLAlchemy async engine per application (aiomysql for MySQL/MariaDB)
- Provide the async session dependency used by request handlers
- Provide Base declarative class for ORM models

The Database handle is constructed explicitly by the app factory and stored on
``app.state.database``; handlers reach it through ``get_db_session``.
"""
import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
	def __init__(self, url: str, echo: bool = False):
		self.url = url
		self.echo = echo
		self._engine: Optional[AsyncEngine] = None
		self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

	def _ensure_engine(self) -> AsyncEngine:
		if self._engine is None:
			self._engine = create_async_engine(self.url, echo=self.echo, future=True)
			self._session_maker = async_sessionmaker(
				self._engine, expire_on_commit=False, class_=AsyncSession
			)
			logger.info("Async DB engine created: %s", self._engine.url.render_as_string(hide_password=True))
		return self._engine

	@property
	def engine(self) -> AsyncEngine:
		"""Create the engine on first use; later calls return the same one."""
		return self._ensure_engine()

	@property
	def session_maker(self) -> async_sessionmaker[AsyncSession]:
		self._ensure_engine()
		return self._session_maker

	async def connect(self) -> None:
		"""
		Verify the database is reachable. A failure here is fatal: the process
		must not serve requests without its only storage.
		"""
		try:
			async with self.engine.connect() as conn:
				await conn.execute(text("SELECT 1"))
		except Exception as e:
			logger.critical("Database connection failed: %s", e)
			raise SystemExit(f"Database connection error: {e}") from e
		logger.info("Database connection established")

	async def ping(self) -> bool:
		try:
			async with self.engine.connect() as conn:
				await conn.execute(text("SELECT 1"))
			return True
		except Exception as e:
			logger.warning("Database ping failed: %s", e)
			return False

	async def create_all(self) -> None:
		# ensure models are imported so tables are registered
		from models import db_models  # noqa: F401

		async with self.engine.begin() as conn:
			await conn.run_sync(Base.metadata.create_all)

	async def dispose(self) -> None:
		if self._engine is not None:
			await self._engine.dispose()
			self._engine = None
			self._session_maker = None


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
	"""Yield an AsyncSession bound to the application's Database handle."""
	database: Database = request.app.state.database
	async with database.session_maker() as session:
		try:
			yield session
		finally:
			await session.close()
