"""
Type mapper — raw catalog type → C# type name for generated entities.
Pure functions, no I/O.
"""
from models.connection import DbKind

STRING = "string"
BYTES = "byte[]"

# Reference types are emitted bare; everything else gets a "?" suffix
REFERENCE_TYPES = {STRING, BYTES}

_PGSQL_TYPES: dict[str, str] = {
    "smallint": "short", "int2": "short",
    "integer": "int", "int4": "int",
    "bigint": "long", "int8": "long",
    "real": "float", "float4": "float",
    "double precision": "double", "float8": "double",
    "numeric": "decimal", "decimal": "decimal",
    "boolean": "bool", "bool": "bool",
    "date": "DateTime",
    "time": "TimeSpan", "time without time zone": "TimeSpan",
    "timetz": "TimeSpan", "time with time zone": "TimeSpan",
    "timestamp": "DateTime", "timestamp without time zone": "DateTime",
    "text": STRING, "varchar": STRING, "char": STRING,
    "character varying": STRING, "character": STRING,
    "json": STRING, "jsonb": STRING,
    "bytea": BYTES,
    "uuid": "Guid",
}
_PGSQL_OFFSET_TYPES = {"timestamptz", "timestamp with time zone"}

_MSSQL_TYPES: dict[str, str] = {
    "smallint": "short",
    "int": "int",
    "bigint": "long",
    "real": "float",
    "float": "double",
    "numeric": "decimal", "decimal": "decimal", "money": "decimal", "smallmoney": "decimal",
    "bit": "bool",
    "date": "DateTime", "datetime": "DateTime", "smalldatetime": "DateTime", "datetime2": "DateTime",
    "time": "TimeSpan",
    "nvarchar": STRING, "varchar": STRING, "nchar": STRING, "char": STRING,
    "text": STRING, "ntext": STRING,
    "varbinary": BYTES, "binary": BYTES, "image": BYTES,
    "uniqueidentifier": "Guid",
}
_MSSQL_OFFSET_TYPES = {"datetimeoffset"}

# SQLite uses type affinity: first matching fragment wins
_SQLITE_AFFINITY: list[tuple[tuple[str, ...], str]] = [
    (("int",), "long"),
    (("char", "text", "clob"), STRING),
    (("blob",), BYTES),
    (("real", "floa", "doub"), "double"),
    (("numeric", "decim"), "decimal"),
    (("bool",), "bool"),
    (("date", "time"), "DateTime"),
]


def _offset_type(use_datetime_offset: bool) -> str:
    return "DateTimeOffset" if use_datetime_offset else "DateTime"


def _base_type(raw: str, db_kind: DbKind, use_datetime_offset: bool) -> str:
    if db_kind is DbKind.PGSQL:
        if raw in _PGSQL_OFFSET_TYPES:
            return _offset_type(use_datetime_offset)
        return _PGSQL_TYPES.get(raw, STRING)
    if db_kind is DbKind.MSSQL:
        if raw in _MSSQL_OFFSET_TYPES:
            return _offset_type(use_datetime_offset)
        return _MSSQL_TYPES.get(raw, STRING)
    if db_kind is DbKind.SQLITE:
        for fragments, target in _SQLITE_AFFINITY:
            if any(f in raw for f in fragments):
                return target
        return STRING
    if db_kind is DbKind.UNKNOWN:
        return STRING
    raise ValueError(f"Unsupported DB kind: {db_kind!r}")


def map_db_type(raw_type: str, is_nullable: bool, db_kind: DbKind, use_datetime_offset: bool = False) -> str:
    """
    Map a raw catalog type to the C# type used in generated code.

    `is_nullable` is accepted but not consulted: value types are always
    returned in their nullable form ("int?"), reference types (string,
    byte[]) are always returned bare. Generated code relies on every value
    column being nullable-typed, so this must not follow the column's
    actual nullability.
    """
    if not isinstance(db_kind, DbKind):
        raise ValueError(f"Unsupported DB kind: {db_kind!r}")
    target = _base_type((raw_type or "").strip().lower(), db_kind, use_datetime_offset)
    if target in REFERENCE_TYPES:
        return target
    return target + "?"