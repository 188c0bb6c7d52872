"""Pydantic schemas for translation dictionary records."""
from pydantic import BaseModel, ConfigDict


class TableTranslation(BaseModel):
    model_config = ConfigDict(frozen=True)

    schema_name: str
    original_table: str
    translated_table: str             # display name
    class_name: str                   # target class identifier
    module_name: str                  # target module identifier


class ColumnTranslation(BaseModel):
    model_config = ConfigDict(frozen=True)

    schema_name: str
    table_name: str
    original_column: str
    translated_column: str            # display name
    property_name: str                # target property identifier
