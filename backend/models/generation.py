"""Pydantic schemas for reconciled metadata and generation runs."""
from typing import Literal, Optional
from pydantic import BaseModel, Field

from models.table import ColumnDefinition, TableDefinition
from models.translation import ColumnTranslation, TableTranslation


class ReconciledColumn(BaseModel):
    translation: ColumnTranslation
    definition: ColumnDefinition
    is_primary_key: bool = False
    is_composite: bool = False
    is_identity: bool = False
    target_type: Optional[str] = None     # e.g. "int?", filled when the dialect is known


class ReconciledTable(BaseModel):
    """Everything a renderer needs for one table."""
    table: TableTranslation
    columns: list[ReconciledColumn]
    definition: TableDefinition


class TableOutcome(BaseModel):
    schema_name: str
    table_name: str
    status: Literal["generated", "skipped"]
    reason: Optional[str] = None
    columns_generated: int = 0


class RunSummary(BaseModel):
    outcomes: list[TableOutcome] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    tables: list[ReconciledTable] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def generated_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "generated")

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "skipped")

    def lines(self) -> list[str]:
        out = []
        for o in self.outcomes:
            name = f"{o.schema_name}.{o.table_name}"
            if o.status == "generated":
                out.append(f"generated {name} ({o.columns_generated} columns)")
            else:
                out.append(f"skipped {name}: {o.reason}")
        out.extend(f"warning: {w}" for w in self.warnings)
        return out


class GenerateRequest(BaseModel):
    connection_string: Optional[str] = None       # None = settings.CONNECTION_STRING
    db_type: Optional[str] = None
    tables: list[str] = []                        # "schema.table" or "table"; empty = all translatable
    use_datetime_offset: Optional[bool] = None


class GenerationResponse(BaseModel):
    db_kind: str
    tables_generated: int
    tables_skipped: int
    duration_seconds: float
    results: list[TableOutcome]
    warnings: list[str]
    metadata: list[ReconciledTable]
