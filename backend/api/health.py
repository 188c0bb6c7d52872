"""GET /api/health — service and configured-database check."""
import logging
from fastapi import APIRouter
from config import settings
from core.db_connector import check_connection, create_engine_from_request
from models.connection import ConnectionRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    db_status = await _check_database()
    overall = "ok" if db_status["status"] in ("up", "not_configured") else "degraded"
    return {
        "status": overall,
        "services": {
            "database": db_status,
        },
    }


async def _check_database() -> dict:
    if not settings.CONNECTION_STRING:
        return {"status": "not_configured"}
    req = ConnectionRequest(connection_string=settings.CONNECTION_STRING, db_type=settings.DB_TYPE or None)
    try:
        engine = create_engine_from_request(req)
    except Exception as e:
        return {"status": "down", "error": str(e)}
    try:
        await check_connection(engine)
        return {"status": "up", "db_kind": req.db_kind.value}
    except Exception as e:
        return {"status": "down", "error": str(e)}
    finally:
        await engine.dispose()
