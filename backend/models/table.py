"""Pydantic schemas for physical table and column definitions."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, model_validator


class ColumnDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    db_type: str                      # raw catalog type, e.g. "character varying"
    is_nullable: bool = True
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None


class TableDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    schema_name: str
    name: str
    columns: list[ColumnDefinition] = []
    primary_keys: list[str] = []      # in key-sequence order
    identity_columns: list[str] = []

    @model_validator(mode="after")
    def _keys_are_columns(self) -> "TableDefinition":
        known = {c.name.lower() for c in self.columns}
        for label, names in (("primary key", self.primary_keys), ("identity", self.identity_columns)):
            stray = [n for n in names if n.lower() not in known]
            if stray:
                raise ValueError(
                    f"{self.schema_name}.{self.name}: {label} column(s) not in table: {', '.join(stray)}"
                )
        return self

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.name}"

    @property
    def is_composite_key(self) -> bool:
        return len(self.primary_keys) > 1

    def find_column(self, name: str) -> Optional[ColumnDefinition]:
        lowered = name.lower()
        return next((c for c in self.columns if c.name.lower() == lowered), None)

    def is_primary_key(self, name: str) -> bool:
        return name.lower() in {k.lower() for k in self.primary_keys}

    def is_identity(self, name: str) -> bool:
        return name.lower() in {k.lower() for k in self.identity_columns}
