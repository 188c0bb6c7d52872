"""
Database connector — async SQLAlchemy engine factory and scoped connections.
Every catalog or dictionary query goes through `open_connection`, which
releases the connection on every exit path and turns driver failures into
IntrospectionError.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from models.connection import ConnectionRequest, DbKind

logger = logging.getLogger(__name__)


class IntrospectionError(RuntimeError):
    """Connection or catalog failure. Fatal for the whole run, never retried."""


def create_engine_from_request(req: ConnectionRequest) -> AsyncEngine:
    """Build an async engine for the request's dialect. No connection is opened yet."""
    url = req.get_sqlalchemy_url()
    logger.debug("Creating %s engine for %s", req.db_kind.value, url.render_as_string(hide_password=True))
    return create_async_engine(url, pool_pre_ping=True)


@asynccontextmanager
async def open_connection(engine: AsyncEngine) -> AsyncIterator[AsyncConnection]:
    try:
        async with engine.connect() as conn:
            yield conn
    except (SQLAlchemyError, OSError, TypeError) as e:
        raise IntrospectionError(f"Database query failed: {e}") from e


async def check_connection(engine: AsyncEngine) -> None:
    """Run SELECT 1; raises IntrospectionError when the database is unreachable."""
    async with open_connection(engine) as conn:
        await conn.execute(text("SELECT 1"))


def get_default_schema(db_kind: DbKind) -> str:
    if db_kind is DbKind.PGSQL:
        return "public"
    if db_kind is DbKind.SQLITE:
        return "main"
    return "dbo"


def quote_identifier(name: str) -> str:
    """Double-quote an identifier for PostgreSQL/SQLite."""
    return '"' + name.replace('"', '""') + '"'
