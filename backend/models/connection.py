"""Pydantic schemas for target database connections and dialect detection."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError


class DbKind(str, Enum):
    PGSQL = "pgsql"
    MSSQL = "mssql"
    SQLITE = "sqlite"
    UNKNOWN = "unknown"


# Async drivers used by the SQLAlchemy asyncio engine
_ASYNC_DRIVERS = {
    DbKind.PGSQL: "postgresql+asyncpg",
    DbKind.MSSQL: "mssql+aioodbc",
    DbKind.SQLITE: "sqlite+aiosqlite",
}

# libpq URL options asyncpg has no equivalent for
_LIBPQ_ONLY_OPTIONS = frozenset({
    "sslcert", "sslkey", "sslrootcert", "sslcrl", "sslpassword",
    "connect_timeout", "application_name", "options", "target_session_attrs",
    "gssencmode", "channel_binding", "keepalives", "keepalives_idle",
    "keepalives_interval", "keepalives_count", "client_encoding", "service",
})


def detect_db_kind(db_type: Optional[str], connection_string: str) -> DbKind:
    """
    Resolve the dialect from an explicit type name, falling back to the
    shape of the connection string. Returns DbKind.UNKNOWN when neither helps.
    """
    if db_type and db_type.strip():
        try:
            kind = DbKind(db_type.strip().lower())
        except ValueError:
            return DbKind.UNKNOWN
        return kind

    lowered = (connection_string or "").lower()

    # SQLAlchemy URLs carry the dialect in their scheme
    if lowered.startswith("postgres"):
        return DbKind.PGSQL
    if lowered.startswith("mssql"):
        return DbKind.MSSQL
    if lowered.startswith("sqlite"):
        return DbKind.SQLITE

    if "host=" in lowered or "username=" in lowered or "postgres" in lowered:
        return DbKind.PGSQL
    if (
        "initial catalog=" in lowered
        or ("data source=" in lowered and ".sqlite" not in lowered)
        or "server=" in lowered
    ):
        return DbKind.MSSQL
    if ".db" in lowered or ("data source=" in lowered and ".sqlite" in lowered):
        return DbKind.SQLITE
    return DbKind.UNKNOWN


def _parse_key_values(connection_string: str) -> dict[str, str]:
    """Split an ADO-style 'Key=Value;Key=Value' string into lower-cased keys."""
    pairs: dict[str, str] = {}
    for part in connection_string.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        pairs[key.strip().lower()] = value.strip()
    return pairs


class ConnectionRequest(BaseModel):
    connection_string: str = Field("", description="SQLAlchemy URL or Key=Value; connection string")
    db_type: Optional[str] = Field(None, description="pgsql | mssql | sqlite (detected when omitted)")

    @property
    def db_kind(self) -> DbKind:
        return detect_db_kind(self.db_type, self.connection_string)

    def get_sqlalchemy_url(self) -> URL:
        """Build an async-driver URL for the detected dialect."""
        kind = self.db_kind
        if kind is DbKind.UNKNOWN:
            raise ValueError("Cannot determine database type; pass db_type as pgsql | mssql | sqlite")
        if not self.connection_string.strip():
            raise ValueError("Connection string is empty")
        driver = _ASYNC_DRIVERS[kind]

        if "://" in self.connection_string:
            try:
                url = make_url(self.connection_string)
            except ArgumentError as e:
                raise ValueError(f"Malformed connection string: {e}") from e
            url = url.set(drivername=driver)
            if kind is DbKind.PGSQL:
                url = _asyncpg_query(url)
            return url

        opts = _parse_key_values(self.connection_string)
        if kind is DbKind.SQLITE:
            return URL.create(driver, database=opts.get("data source") or opts.get("filename"))
        if kind is DbKind.MSSQL:
            return URL.create(driver, query={"odbc_connect": self.connection_string})

        port = opts.get("port")
        try:
            port_number = int(port) if port else None
        except ValueError as e:
            raise ValueError(f"Malformed port in connection string: {port!r}") from e
        return URL.create(
            driver,
            username=opts.get("username") or opts.get("user id") or opts.get("user"),
            password=opts.get("password"),
            host=opts.get("host") or opts.get("server"),
            port=port_number,
            database=opts.get("database"),
        )


def _asyncpg_query(url: URL) -> URL:
    """Rename sslmode to asyncpg's ssl option and refuse libpq-only options."""
    query = dict(url.query)
    unsupported = sorted(k for k in query if k.lower() in _LIBPQ_ONLY_OPTIONS)
    if unsupported:
        raise ValueError(f"Malformed connection string: unsupported option(s) {', '.join(unsupported)}")
    if "sslmode" in query:
        query["ssl"] = query.pop("sslmode")
    return url.set(query=query)
