"""
Database connection management

Wraps one pooled SQLAlchemy AsyncEngine (aiomysql driver) behind the small
helper the metadata engine talks to:

    execute_raw(sql)          plain SQL text -> list of row dicts
    execute(statement)        SQLAlchemy Core construct -> list of row dicts
    escape_identifier(name)   backtick-quoted identifier for raw SQL
    identifier(name)          force-quoted name for Core constructs
    transaction(work)         runs `work` on one connection, commit or rollback

Usage:
    from table_browser.core.database import get_database

    db = get_database()
    rows = await db.execute_raw("SHOW SCHEMAS")

    async def work():
        await db.execute(insert(...))
    await db.transaction(work)
"""
import logging
from contextvars import ContextVar
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from sqlalchemy import text
from sqlalchemy.engine import URL, Result
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.sql.elements import quoted_name

from table_browser.core.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Global engine and helper instances
_mysql_engine: Optional[AsyncEngine] = None
_database: Optional["Database"] = None

# Connection of the transaction running in the current task, if any
_current_connection: ContextVar[Optional[AsyncConnection]] = ContextVar(
    "current_connection", default=None
)


def get_mysql_engine() -> AsyncEngine:
    """
    Get the MySQL AsyncEngine (with connection pool)

    Returns:
        SQLAlchemy AsyncEngine instance
    """
    global _mysql_engine

    if _mysql_engine is None:
        settings = get_settings()

        url = URL.create(
            drivername="mysql+aiomysql",
            username=settings.MYSQL_USER,
            password=settings.MYSQL_PASSWORD,
            host=settings.MYSQL_HOST,
            port=settings.MYSQL_PORT,
            database=settings.MYSQL_DB,
            query={"charset": "utf8mb4"}
        )

        _mysql_engine = create_async_engine(
            url,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=30,                         # Seconds to wait for a free connection
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,                      # Check connections before use
            echo=False
        )

        logger.info(
            f"[Database] MySQL pool initialised "
            f"(pool_size={settings.DB_POOL_SIZE}, max_overflow={settings.DB_MAX_OVERFLOW})"
        )

    return _mysql_engine


def _rows(result: Result) -> List[Dict[str, Any]]:
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings()]


class Database:
    """
    SQL execution helper over an AsyncEngine

    Statements issued inside `transaction(work)` from the same task share the
    transaction's connection. Everything else borrows a pooled connection per
    statement.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def escape_identifier(self, name: str) -> str:
        """Quote an identifier for use inside raw SQL text"""
        return self._engine.dialect.identifier_preparer.quote_identifier(name)

    def identifier(self, name: str) -> quoted_name:
        """Name that SQLAlchemy will always quote, e.g. a column called `integer`"""
        return quoted_name(name, quote=True)

    async def execute_raw(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return await self._run(text(sql), params)

    async def execute(self, statement) -> List[Dict[str, Any]]:
        return await self._run(statement)

    async def _run(self, statement, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        conn = _current_connection.get()
        if conn is not None:
            return _rows(await conn.execute(statement, params))

        async with self._engine.connect() as conn:
            return _rows(await conn.execute(statement, params))

    async def transaction(self, work: Callable[[], Awaitable[T]]) -> T:
        """
        Run `work` inside one transaction

        Commits when `work` returns, rolls back when it raises (cancellation
        included) and re-raises the original error.
        """
        async with self._engine.begin() as conn:
            token = _current_connection.set(conn)
            try:
                return await work()
            finally:
                _current_connection.reset(token)


def get_database() -> Database:
    """Get the shared Database helper"""
    global _database

    if _database is None:
        _database = Database(get_mysql_engine())
    return _database


async def close_database():
    """
    Dispose the MySQL pool

    Called on application shutdown.
    """
    global _mysql_engine, _database

    if _mysql_engine is not None:
        await _mysql_engine.dispose()
        _mysql_engine = None
        _database = None
        logger.info("[Database] MySQL pool closed")
