"""
Database connection with SQLAlchemy ORM
"""

from typing import Optional
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine

from chess_daily.infra.config.settings import get_settings
from chess_daily.infra.models import Base
from chess_daily.core.logger.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()


class DatabaseManager:
    """SQLAlchemy async database manager"""

    def __init__(self, database_url: Optional[str] = None):
        self._database_url = database_url or settings.DATABASE_URL
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    def _engine_options(self) -> dict:
        """Pool options; SQLite drivers manage their own connections"""
        if self._database_url.startswith("sqlite"):
            return {}
        return {
            "pool_pre_ping": True,
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_recycle": 3600,
        }

    async def connect(self, create_tables: bool = True) -> AsyncEngine:
        """Initialize database engine and session factory"""
        if self._engine is not None:
            return self._engine

        if not self._database_url:
            raise RuntimeError("DATABASE_URL is not configured")

        try:
            self._engine = create_async_engine(
                self._database_url,
                echo=settings.DB_LOGGING_ENABLED,
                **self._engine_options()
            )

            # Create session factory
            self._session_factory = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False
            )

            async with self._engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if create_tables:
                    await conn.run_sync(Base.metadata.create_all)

            logger.info(
                "Connected to database with SQLAlchemy successfully",
                extra={
                    "dialect": self._engine.dialect.name,
                    "tables_created": create_tables
                }
            )

            return self._engine

        except Exception as e:
            logger.error(
                "Failed to connect to database",
                extra={"error": str(e)}
            )
            self._engine = None
            self._session_factory = None
            raise

    async def close(self):
        """Close database engine"""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine closed")
            self._engine = None
            self._session_factory = None

    def get_engine(self) -> Optional[AsyncEngine]:
        """Get the current engine"""
        return self._engine

    def get_session_factory(self) -> Optional[async_sessionmaker]:
        """Get the session factory"""
        return self._session_factory
