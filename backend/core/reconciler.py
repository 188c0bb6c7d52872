"""
Metadata reconciler — joins a physical table definition with its dictionary
translations and annotates each surviving column with its key roles.
"""
import logging
from typing import Optional

from pydantic import BaseModel, Field

from core.type_mapper import map_db_type
from models.connection import DbKind
from models.generation import ReconciledColumn, ReconciledTable
from models.table import TableDefinition
from models.translation import ColumnTranslation, TableTranslation

logger = logging.getLogger(__name__)


class ReconciliationResult(BaseModel):
    table: ReconciledTable
    missing_columns: list[str] = Field(default_factory=list)   # physical order
    warnings: list[str] = Field(default_factory=list)

    @property
    def columns(self) -> list[ReconciledColumn]:
        return self.table.columns


def reconcile(
    table_translation: TableTranslation,
    column_translations: list[ColumnTranslation],
    table_definition: TableDefinition,
    db_kind: Optional[DbKind] = None,
    use_datetime_offset: bool = False,
) -> ReconciliationResult:
    """
    Keep the translations that match a physical column (case-insensitive),
    report physical columns without a translation, and flag key roles.
    Output order follows `column_translations`. A table without a primary
    key is not an error here.
    """
    is_composite = table_definition.is_composite_key
    columns: list[ReconciledColumn] = []
    translated: set[str] = set()

    for ct in column_translations:
        definition = table_definition.find_column(ct.original_column)
        if definition is None:
            continue
        translated.add(definition.name.lower())
        columns.append(ReconciledColumn(
            translation=ct,
            definition=definition,
            is_primary_key=table_definition.is_primary_key(definition.name),
            is_composite=is_composite,
            is_identity=table_definition.is_identity(definition.name),
            target_type=(
                map_db_type(definition.db_type, definition.is_nullable, db_kind, use_datetime_offset)
                if db_kind is not None else None
            ),
        ))

    missing = [c.name for c in table_definition.columns if c.name.lower() not in translated]
    warnings = []
    if missing:
        warnings.append(
            f"Table {table_definition.qualified_name} is missing column translations: "
            f"{', '.join(missing)} (untranslated columns skipped)"
        )
        logger.debug("%s: untranslated columns %s", table_definition.qualified_name, missing)

    return ReconciliationResult(
        table=ReconciledTable(table=table_translation, columns=columns, definition=table_definition),
        missing_columns=missing,
        warnings=warnings,
    )
