"""
Generation driver — runs each requested table through
translation lookup → introspection → reconciliation → rendering.

Tables are processed one at a time in the caller's order. Missing
translations only produce warnings; connection and catalog failures
(IntrospectionError) abort the whole run.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

from core.db_connector import get_default_schema
from core.db_explorer import DbExplorer
from core.reconciler import reconcile
from models.connection import DbKind
from models.generation import ReconciledTable, RunSummary, TableOutcome

logger = logging.getLogger(__name__)

# Receives the reconciled metadata of one table and writes its artifacts
Renderer = Callable[[ReconciledTable], Awaitable[None]]


def parse_table_names(items: Iterable[str], db_kind: DbKind) -> list[tuple[str, str]]:
    """
    Turn "schema.table" / "table" strings (comma-separated allowed) into
    (schema, table) pairs. Bare names get the dialect's default schema.
    Raises ValueError for names with more than two parts.
    """
    default_schema = get_default_schema(db_kind)
    tables: list[tuple[str, str]] = []
    for item in items:
        for entry in item.split(","):
            parts = [p.strip() for p in entry.split(".") if p.strip()]
            if not parts:
                continue
            if len(parts) > 2:
                raise ValueError(f"Invalid table name {entry.strip()!r}: expected schema.table or table")
            if len(parts) == 1:
                tables.append((default_schema, parts[0]))
            else:
                tables.append((parts[0], parts[1]))
    return tables


class GenerationDriver:
    def __init__(
        self,
        explorer: DbExplorer,
        db_kind: Optional[DbKind] = None,
        use_datetime_offset: bool = False,
        renderer: Optional[Renderer] = None,
    ):
        self.explorer = explorer
        self.db_kind = db_kind or explorer.db_kind
        self.use_datetime_offset = use_datetime_offset
        self.renderer = renderer

    async def generate_table(self, schema: str, table: str, summary: RunSummary) -> TableOutcome:
        translation = await self.explorer.get_table_translation(schema, table)
        if translation is None:
            reason = "no table translation in dictionary"
            summary.warnings.append(f"Skipped {schema}.{table}: {reason}")
            logger.debug("Skipping %s.%s: %s", schema, table, reason)
            return TableOutcome(schema_name=schema, table_name=table, status="skipped", reason=reason)

        column_translations = await self.explorer.get_column_translations(schema, table)
        definition = await self.explorer.get_table_definition(schema, table)

        result = reconcile(
            translation,
            column_translations,
            definition,
            db_kind=self.db_kind,
            use_datetime_offset=self.use_datetime_offset,
        )
        summary.warnings.extend(result.warnings)

        if self.renderer is not None:
            await self.renderer(result.table)
        summary.tables.append(result.table)

        logger.info(
            "Generated %s.%s → %s.%s (%d columns)",
            schema, table, translation.module_name, translation.class_name, len(result.columns),
        )
        return TableOutcome(
            schema_name=schema,
            table_name=table,
            status="generated",
            columns_generated=len(result.columns),
        )

    async def run(
        self,
        tables: Iterable[tuple[str, str]],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> RunSummary:
        summary = RunSummary()
        for schema, table in tables:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Generation cancelled before %s.%s", schema, table)
                summary.cancelled = True
                break
            summary.outcomes.append(await self.generate_table(schema, table, summary))
        return summary


def report_summary(summary: RunSummary, log: logging.Logger = logger) -> None:
    """Log the complete warning list, then the completion line."""
    if summary.warnings:
        log.warning("Warning summary:")
        for w in summary.warnings:
            log.warning("- %s", w)
    log.info(
        "Done%s: %d generated, %d skipped.",
        " (cancelled)" if summary.cancelled else "",
        summary.generated_count,
        summary.skipped_count,
    )
