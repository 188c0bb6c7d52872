from models.connection import ConnectionRequest, DbKind, detect_db_kind  # noqa: F401
from models.table import ColumnDefinition, TableDefinition  # noqa: F401
from models.translation import ColumnTranslation, TableTranslation  # noqa: F401
from models.generation import ReconciledColumn, ReconciledTable, TableOutcome, RunSummary  # noqa: F401
from models.generation import GenerateRequest, GenerationResponse  # noqa: F401
