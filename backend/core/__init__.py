from core.type_mapper import map_db_type  # noqa: F401
from core.db_connector import IntrospectionError, create_engine_from_request  # noqa: F401
from core.translation_store import InMemoryTranslationStore, SqlTranslationStore  # noqa: F401
from core.db_explorer import create_explorer  # noqa: F401
from core.reconciler import reconcile  # noqa: F401
from core.generator import GenerationDriver, parse_table_names, report_summary  # noqa: F401
