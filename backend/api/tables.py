"""POST /api/tables — list the tables the translation dictionary can generate."""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from config import settings
from core.db_connector import IntrospectionError
from core.db_explorer import DbExplorer, create_explorer
from models.connection import ConnectionRequest, DbKind

router = APIRouter()
logger = logging.getLogger(__name__)


def resolve_connection(connection_string: Optional[str], db_type: Optional[str]) -> ConnectionRequest:
    """Fill missing fields from settings and reject unknown dialects before any query runs."""
    req = ConnectionRequest(
        connection_string=connection_string or settings.CONNECTION_STRING,
        db_type=db_type or settings.DB_TYPE or None,
    )
    if not req.connection_string.strip():
        raise HTTPException(400, detail="No connection string given and CONNECTION_STRING is not set.")
    if req.db_kind is DbKind.UNKNOWN:
        raise HTTPException(400, detail="Cannot determine database type; pass db_type as pgsql | mssql | sqlite.")
    return req


def open_explorer(req: ConnectionRequest) -> DbExplorer:
    try:
        return create_explorer(req.db_kind, req.connection_string)
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


@router.post("/tables")
async def list_tables(req: ConnectionRequest):
    conn_req = resolve_connection(req.connection_string, req.db_type)
    try:
        async with open_explorer(conn_req) as explorer:
            tables = await explorer.list_distinct_tables()
    except IntrospectionError as e:
        logger.error("Listing tables failed: %s", e)
        raise HTTPException(502, detail=str(e))
    return {
        "db_kind": conn_req.db_kind.value,
        "tables": [{"schema_name": s, "table_name": t} for s, t in tables],
    }
