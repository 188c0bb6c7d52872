"""
Translation dictionary access.

The dictionary is curated by hand outside this service and only ever read
here. Two logical tables:
  - table translations keyed by (schema, original table)
  - column translations keyed by (schema, table, original column)
"""
import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from config import Settings, settings as default_settings
from core.db_connector import open_connection, quote_identifier
from models.translation import ColumnTranslation, TableTranslation

logger = logging.getLogger(__name__)


class TranslationStore(ABC):
    """Key-lookup capability over the translation dictionary."""

    @abstractmethod
    async def list_tables(self) -> list[tuple[str, str]]:
        """Distinct (schema, table) pairs that have a table translation, ordered."""

    @abstractmethod
    async def get_table_translation(self, schema: str, table: str) -> Optional[TableTranslation]:
        """Exact, case-sensitive lookup. None when the table is not in the dictionary."""

    @abstractmethod
    async def get_column_translations(self, schema: str, table: str) -> list[ColumnTranslation]:
        """All column rows for the table, ordered by original column name."""


class InMemoryTranslationStore(TranslationStore):
    def __init__(
        self,
        tables: Iterable[TableTranslation] = (),
        columns: Iterable[ColumnTranslation] = (),
    ):
        self._tables: dict[tuple[str, str], TableTranslation] = {}
        for t in tables:
            self._tables.setdefault((t.schema_name, t.original_table), t)
        self._columns: dict[tuple[str, str], dict[str, ColumnTranslation]] = {}
        for c in columns:
            self._columns.setdefault((c.schema_name, c.table_name), {}).setdefault(c.original_column, c)

    async def list_tables(self) -> list[tuple[str, str]]:
        return sorted(self._tables)

    async def get_table_translation(self, schema: str, table: str) -> Optional[TableTranslation]:
        return self._tables.get((schema, table))

    async def get_column_translations(self, schema: str, table: str) -> list[ColumnTranslation]:
        rows = self._columns.get((schema, table), {})
        return [rows[name] for name in sorted(rows)]


class SqlTranslationStore(TranslationStore):
    """Dictionary stored as two relational tables, read with bound parameters."""

    def __init__(self, engine: AsyncEngine, config: Optional[Settings] = None):
        config = config or default_settings
        self._engine = engine
        dict_schema = quote_identifier(config.DICTIONARY_SCHEMA)
        self._table_source = f"{dict_schema}.{quote_identifier(config.TABLE_TRANSLATION_TABLE)}"
        self._column_source = f"{dict_schema}.{quote_identifier(config.COLUMN_TRANSLATION_TABLE)}"

    async def list_tables(self) -> list[tuple[str, str]]:
        sql = text(
            f"select distinct 綱要名稱, 原始表名 from {self._table_source} "
            f"order by 綱要名稱, 原始表名"
        )
        async with open_connection(self._engine) as conn:
            result = await conn.execute(sql)
            rows = result.fetchall()
        logger.debug("Dictionary lists %d tables", len(rows))
        return [(r[0], r[1]) for r in rows]

    async def get_table_translation(self, schema: str, table: str) -> Optional[TableTranslation]:
        sql = text(
            f"select 綱要名稱, 原始表名, 翻譯後表名, 類別名稱, 模組名稱 from {self._table_source} "
            f"where 綱要名稱 = :schema and 原始表名 = :table limit 1"
        )
        async with open_connection(self._engine) as conn:
            result = await conn.execute(sql, {"schema": schema, "table": table})
            row = result.first()
        if row is None:
            return None
        return TableTranslation(
            schema_name=row[0],
            original_table=row[1],
            translated_table=row[2],
            class_name=row[3],
            module_name=row[4],
        )

    async def get_column_translations(self, schema: str, table: str) -> list[ColumnTranslation]:
        sql = text(
            f"select 綱要名稱, 表格名稱, 原始欄位名, 翻譯後欄位名, 屬性名稱 from {self._column_source} "
            f"where 綱要名稱 = :schema and 表格名稱 = :table order by 原始欄位名"
        )
        async with open_connection(self._engine) as conn:
            result = await conn.execute(sql, {"schema": schema, "table": table})
            rows = result.fetchall()
        return [
            ColumnTranslation(
                schema_name=r[0],
                table_name=r[1],
                original_column=r[2],
                translated_column=r[3],
                property_name=r[4],
            )
            for r in rows
        ]
