"""Composition root for wiring infrastructure adapters."""

from finexplorer.application.ports.code_definitions_repository import (
    CodeDefinitionsRepositoryPort,
)
from finexplorer.application.ports.database import DatabaseEnginePort
from finexplorer.application.ports.records_repository import (
    FinancialRecordsRepositoryPort,
)
from finexplorer.application.ports.scaling_repository import (
    ScalingValuesRepositoryPort,
)
from finexplorer.application.use_cases.calculate_balances import (
    CalculateBalancesUseCase,
)
from finexplorer.application.use_cases.compare_entities import (
    CompareEntitiesUseCase,
)
from finexplorer.application.use_cases.get_aggregated_data import (
    GetAggregatedDataUseCase,
)
from finexplorer.application.use_cases.optimize_scaling import (
    OptimizeScalingUseCase,
)
from finexplorer.infrastructure.cache import TTLCache, memoize
from finexplorer.infrastructure.code_definitions_repository import (
    SqlAlchemyCodeDefinitionsRepository,
)
from finexplorer.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from finexplorer.infrastructure.logging.logger import get_app_logger
from finexplorer.infrastructure.records_repository import (
    SqlAlchemyFinancialRecordsRepository,
)
from finexplorer.infrastructure.scaling_repository import (
    SqlAlchemyScalingValuesRepository,
)
from finexplorer.infrastructure.settings import ExplorerSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_cache(settings: ExplorerSettings | None = None) -> TTLCache | None:
    """Return a loader cache, or None when the TTL is zero."""
    resolved = settings or ExplorerSettings.from_env()
    if resolved.cache_ttl_seconds <= 0:
        return None
    return TTLCache(ttl_seconds=resolved.cache_ttl_seconds)


def build_code_definitions_repository(
    db_port: DatabaseEnginePort | None = None,
    cache: TTLCache | None = None,
) -> CodeDefinitionsRepositoryPort:
    """Return the code definitions repository, memoized when cached."""
    resolved_db = db_port or build_database_adapter()
    repository = SqlAlchemyCodeDefinitionsRepository(resolved_db)
    if cache is not None:
        repository.fetch_code_definitions = memoize(cache)(
            repository.fetch_code_definitions
        )
    return repository


def _records_key(dimension, entity_ids=None, years=None):
    return (
        "fetch_records",
        dimension,
        tuple(entity_ids or ()),
        tuple(str(year) for year in years or ()),
    )


def build_records_repository(
    db_port: DatabaseEnginePort | None = None,
    cache: TTLCache | None = None,
) -> FinancialRecordsRepositoryPort:
    """Return the financial records repository, memoized when cached."""
    resolved_db = db_port or build_database_adapter()
    repository = SqlAlchemyFinancialRecordsRepository(resolved_db)
    if cache is not None:
        repository.fetch_records = memoize(cache, key=_records_key)(
            repository.fetch_records
        )
    return repository


def build_scaling_repository(
    db_port: DatabaseEnginePort | None = None,
) -> ScalingValuesRepositoryPort:
    """Return the scaling values repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyScalingValuesRepository(resolved_db)


def build_aggregated_data_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: ExplorerSettings | None = None,
) -> GetAggregatedDataUseCase:
    """Return the aggregation use case wired to the finance database."""
    resolved_settings = settings or ExplorerSettings.from_env()
    resolved_db = db_port or build_database_adapter()
    cache = build_cache(resolved_settings)
    return GetAggregatedDataUseCase(
        code_definitions_repository=build_code_definitions_repository(
            resolved_db,
            cache,
        ),
        records_repository=build_records_repository(resolved_db, cache),
        logger=get_app_logger(),
        language=resolved_settings.language,
    )


def build_optimize_scaling_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: ExplorerSettings | None = None,
) -> OptimizeScalingUseCase:
    """Return the scaling optimization use case."""
    resolved_db = db_port or build_database_adapter()
    return OptimizeScalingUseCase(
        aggregated_data=build_aggregated_data_use_case(resolved_db, settings),
        scaling_repository=build_scaling_repository(resolved_db),
        config=ExplorerSettings.optimization_config(),
        logger=get_app_logger(),
    )


def build_compare_entities_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: ExplorerSettings | None = None,
) -> CompareEntitiesUseCase:
    """Return the entity comparison use case."""
    return CompareEntitiesUseCase(
        aggregated_data=build_aggregated_data_use_case(db_port, settings),
        logger=get_app_logger(),
    )


def build_calculate_balances_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: ExplorerSettings | None = None,
) -> CalculateBalancesUseCase:
    """Return the income and expense balance use case."""
    resolved_settings = settings or ExplorerSettings.from_env()
    resolved_db = db_port or build_database_adapter()
    cache = build_cache(resolved_settings)
    return CalculateBalancesUseCase(
        records_repository=build_records_repository(resolved_db, cache),
        code_definitions_repository=build_code_definitions_repository(
            resolved_db,
            cache,
        ),
        logger=get_app_logger(),
        language=resolved_settings.language,
    )


__all__ = [
    "build_database_adapter",
    "build_cache",
    "build_code_definitions_repository",
    "build_records_repository",
    "build_scaling_repository",
    "build_aggregated_data_use_case",
    "build_optimize_scaling_use_case",
    "build_compare_entities_use_case",
    "build_calculate_balances_use_case",
]
