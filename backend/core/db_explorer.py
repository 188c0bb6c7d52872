"""
Schema explorers — one per SQL dialect.

Each explorer answers four questions about the target database: which tables
the dictionary can translate, the table and column translations, and the
physical table definition. PostgreSQL is fully implemented. SQL Server and
SQLite are placeholders that return empty results.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from config import Settings
from core.db_connector import create_engine_from_request, open_connection
from core.translation_store import SqlTranslationStore, TranslationStore
from models.connection import ConnectionRequest, DbKind
from models.table import ColumnDefinition, TableDefinition
from models.translation import ColumnTranslation, TableTranslation

logger = logging.getLogger(__name__)


class DbExplorer(ABC):
    """Abstract base for dialect explorers."""

    db_kind: DbKind = DbKind.UNKNOWN

    def __init__(self, connection_string: str):
        if not connection_string or not connection_string.strip():
            raise ValueError("connection_string must not be empty")
        self.connection_string = connection_string

    @abstractmethod
    async def list_distinct_tables(self) -> list[tuple[str, str]]:
        """Tables present in the translation dictionary, as (schema, table)."""

    @abstractmethod
    async def get_table_translation(self, schema: str, table: str) -> Optional[TableTranslation]:
        pass

    @abstractmethod
    async def get_column_translations(self, schema: str, table: str) -> list[ColumnTranslation]:
        pass

    @abstractmethod
    async def get_table_definition(self, schema: str, table: str) -> TableDefinition:
        pass

    async def dispose(self) -> None:
        """Release pooled connections. Override if the explorer owns an engine."""

    async def __aenter__(self) -> "DbExplorer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.dispose()


# ── PostgreSQL ────────────────────────────────────────────────────────────────

_PG_COLUMNS_SQL = """
select c.column_name,
       c.data_type,
       (c.is_nullable = 'YES') as is_nullable,
       c.character_maximum_length,
       c.numeric_precision,
       c.numeric_scale
from information_schema.columns c
where c.table_schema = :schema and c.table_name = :table
order by c.ordinal_position
"""

_PG_PRIMARY_KEYS_SQL = """
select kcu.column_name
from information_schema.table_constraints tc
join information_schema.key_column_usage kcu
  on kcu.constraint_name = tc.constraint_name
 and kcu.table_schema = tc.table_schema
 and kcu.table_name = tc.table_name
where tc.table_schema = :schema
  and tc.table_name = :table
  and tc.constraint_type = 'PRIMARY KEY'
order by kcu.ordinal_position
"""

# Native identity (attidentity) or a serial column backed by nextval()
_PG_IDENTITY_SQL = """
select a.attname
from pg_catalog.pg_class t
join pg_catalog.pg_namespace n on n.oid = t.relnamespace
join pg_catalog.pg_attribute a on a.attrelid = t.oid
left join pg_catalog.pg_attrdef d on d.adrelid = a.attrelid and d.adnum = a.attnum
where n.nspname = :schema and t.relname = :table
  and a.attnum > 0 and not a.attisdropped
  and (
       a.attidentity in ('a', 'd')
       or (d.adbin is not null and pg_get_expr(d.adbin, d.adrelid) like 'nextval(%')
  )
"""


def _opt_int(value) -> Optional[int]:
    return None if value is None else int(value)


class PgDbExplorer(DbExplorer):
    db_kind = DbKind.PGSQL

    def __init__(
        self,
        connection_string: str,
        engine: Optional[AsyncEngine] = None,
        store: Optional[TranslationStore] = None,
        config: Optional[Settings] = None,
    ):
        super().__init__(connection_string)
        self._engine = engine or create_engine_from_request(
            ConnectionRequest(connection_string=connection_string, db_type=DbKind.PGSQL.value)
        )
        self._store = store or SqlTranslationStore(self._engine, config)

    async def list_distinct_tables(self) -> list[tuple[str, str]]:
        return await self._store.list_tables()

    async def get_table_translation(self, schema: str, table: str) -> Optional[TableTranslation]:
        return await self._store.get_table_translation(schema, table)

    async def get_column_translations(self, schema: str, table: str) -> list[ColumnTranslation]:
        return await self._store.get_column_translations(schema, table)

    async def get_table_definition(self, schema: str, table: str) -> TableDefinition:
        params = {"schema": schema, "table": table}
        async with open_connection(self._engine) as conn:
            logger.debug("Reading catalog for %s.%s", schema, table)
            column_rows = (await conn.execute(text(_PG_COLUMNS_SQL), params)).fetchall()
            pk_rows = (await conn.execute(text(_PG_PRIMARY_KEYS_SQL), params)).fetchall()
            identity_rows = (await conn.execute(text(_PG_IDENTITY_SQL), params)).fetchall()

        columns = [
            ColumnDefinition(
                name=r[0],
                db_type=r[1],
                is_nullable=bool(r[2]),
                length=_opt_int(r[3]),
                precision=_opt_int(r[4]),
                scale=_opt_int(r[5]),
            )
            for r in column_rows
        ]
        # pg_catalog also lists columns information_schema hides from this role
        visible = {c.name for c in columns}
        return TableDefinition(
            schema_name=schema,
            name=table,
            columns=columns,
            primary_keys=[r[0] for r in pk_rows if r[0] in visible],
            identity_columns=[r[0] for r in identity_rows if r[0] in visible],
        )

    async def dispose(self) -> None:
        await self._engine.dispose()


# ── Placeholders ──────────────────────────────────────────────────────────────

class _EmptyExplorer(DbExplorer):
    """Dialect without catalog support yet: nothing is translatable."""

    async def list_distinct_tables(self) -> list[tuple[str, str]]:
        return []

    async def get_table_translation(self, schema: str, table: str) -> Optional[TableTranslation]:
        return None

    async def get_column_translations(self, schema: str, table: str) -> list[ColumnTranslation]:
        return []

    async def get_table_definition(self, schema: str, table: str) -> TableDefinition:
        return TableDefinition(schema_name=schema, name=table)


class MsDbExplorer(_EmptyExplorer):
    db_kind = DbKind.MSSQL


class SqliteDbExplorer(_EmptyExplorer):
    db_kind = DbKind.SQLITE


_EXPLORERS: dict[DbKind, type[DbExplorer]] = {
    DbKind.PGSQL: PgDbExplorer,
    DbKind.MSSQL: MsDbExplorer,
    DbKind.SQLITE: SqliteDbExplorer,
}


def create_explorer(db_kind: DbKind, connection_string: str, **kwargs) -> DbExplorer:
    """
    Build the explorer for a dialect.

    Extra keyword arguments (engine, store, config) are passed to explorers
    that accept them. DbKind.UNKNOWN is a caller error.
    """
    explorer_cls = _EXPLORERS.get(db_kind) if isinstance(db_kind, DbKind) else None
    if explorer_cls is None:
        raise ValueError(f"Unsupported DB kind: {db_kind!r}")
    if explorer_cls is PgDbExplorer:
        return explorer_cls(connection_string, **kwargs)
    return explorer_cls(connection_string)