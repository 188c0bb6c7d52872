import pytest
from core.reconciler import reconcile
from models.connection import DbKind
from models.table import ColumnDefinition, TableDefinition
from models.translation import ColumnTranslation


def _users_definition(**overrides):
    fields = dict(
        schema_name="public",
        name="users",
        columns=[
            ColumnDefinition(name="id", db_type="integer", is_nullable=False),
            ColumnDefinition(name="name", db_type="text"),
            ColumnDefinition(name="created_at", db_type="timestamptz"),
        ],
        primary_keys=["id"],
        identity_columns=["id"],
    )
    fields.update(overrides)
    return TableDefinition(**fields)


def test_partial_translation(users_translation, users_column_translations):
    result = reconcile(users_translation, users_column_translations, _users_definition())

    assert [c.definition.name for c in result.columns] == ["id", "name"]
    id_col, name_col = result.columns
    assert (id_col.is_primary_key, id_col.is_identity, id_col.is_composite) == (True, True, False)
    assert (name_col.is_primary_key, name_col.is_identity, name_col.is_composite) == (False, False, False)
    assert result.missing_columns == ["created_at"]
    assert len(result.warnings) == 1
    assert "public.users" in result.warnings[0]
    assert "created_at" in result.warnings[0]


def test_output_and_gaps_are_disjoint_and_complete(users_translation):
    definition = _users_definition()
    translations = [
        ColumnTranslation(schema_name="public", table_name="users", original_column="CREATED_AT",
                          translated_column="建立時間", property_name="CreatedAt"),
        ColumnTranslation(schema_name="public", table_name="users", original_column="ghost",
                          translated_column="幽靈", property_name="Ghost"),
    ]
    result = reconcile(users_translation, translations, definition)

    kept = {c.definition.name for c in result.columns}
    assert kept == {"created_at"}
    assert set(result.missing_columns) == {"id", "name"}
    assert kept.isdisjoint(result.missing_columns)
    assert kept | set(result.missing_columns) == {c.name for c in definition.columns}


def test_fully_translated_table_has_no_warnings(users_translation, users_column_translations):
    definition = _users_definition(
        columns=[ColumnDefinition(name="ID", db_type="integer"), ColumnDefinition(name="Name", db_type="text")],
        primary_keys=["ID"],
        identity_columns=[],
    )
    result = reconcile(users_translation, users_column_translations, definition)
    assert result.missing_columns == []
    assert result.warnings == []
    assert result.columns[0].is_primary_key is True


def test_composite_key_flags(users_translation):
    definition = TableDefinition(
        schema_name="public",
        name="order_items",
        columns=[
            ColumnDefinition(name="order_id", db_type="integer"),
            ColumnDefinition(name="line_no", db_type="smallint"),
            ColumnDefinition(name="qty", db_type="integer"),
        ],
        primary_keys=["order_id", "line_no"],
    )
    translations = [
        ColumnTranslation(schema_name="public", table_name="order_items", original_column=c,
                          translated_column=c, property_name=c.title())
        for c in ("line_no", "order_id", "qty")
    ]
    result = reconcile(users_translation, translations, definition)

    flags = {c.definition.name: (c.is_primary_key, c.is_composite) for c in result.columns}
    assert flags == {"line_no": (True, True), "order_id": (True, True), "qty": (False, True)}


def test_target_types_filled_when_dialect_given(users_translation, users_column_translations):
    result = reconcile(users_translation, users_column_translations, _users_definition(),
                       db_kind=DbKind.PGSQL)
    assert [c.target_type for c in result.columns] == ["int?", "string"]

    untyped = reconcile(users_translation, users_column_translations, _users_definition())
    assert all(c.target_type is None for c in untyped.columns)


def test_table_without_primary_key_is_accepted(users_translation, users_column_translations):
    result = reconcile(users_translation, users_column_translations,
                       _users_definition(primary_keys=[], identity_columns=[]))
    assert not any(c.is_primary_key for c in result.columns)


def test_definition_rejects_unknown_key_columns():
    with pytest.raises(ValueError):
        _users_definition(primary_keys=["missing"])
