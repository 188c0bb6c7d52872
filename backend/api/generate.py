"""POST /api/generate — build reconciled metadata for the requested tables."""
import logging
import time

from fastapi import APIRouter, HTTPException

from api.tables import open_explorer, resolve_connection
from config import settings
from core.db_connector import IntrospectionError
from core.generator import GenerationDriver, parse_table_names, report_summary
from models.generation import GenerateRequest, GenerationResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/generate", response_model=GenerationResponse)
async def generate(req: GenerateRequest):
    conn_req = resolve_connection(req.connection_string, req.db_type)
    db_kind = conn_req.db_kind
    use_offset = settings.USE_DATETIME_OFFSET if req.use_datetime_offset is None else req.use_datetime_offset
    try:
        tables = parse_table_names(req.tables, db_kind) if req.tables else None
    except ValueError as e:
        raise HTTPException(400, detail=str(e))
    t0 = time.time()

    try:
        async with open_explorer(conn_req) as explorer:
            if tables is None:
                tables = await explorer.list_distinct_tables()
            driver = GenerationDriver(explorer, db_kind=db_kind, use_datetime_offset=use_offset)
            summary = await driver.run(tables)
    except IntrospectionError as e:
        logger.error("Generation aborted: %s", e)
        raise HTTPException(502, detail=str(e))

    report_summary(summary)
    return GenerationResponse(
        db_kind=db_kind.value,
        tables_generated=summary.generated_count,
        tables_skipped=summary.skipped_count,
        duration_seconds=round(time.time() - t0, 2),
        results=summary.outcomes,
        warnings=summary.warnings,
        metadata=summary.tables,
    )
