"""Use case to aggregate financial records onto the code tree."""

from collections.abc import Sequence

from finexplorer.application.ports.code_definitions_repository import (
    CodeDefinitionsRepositoryPort,
)
from finexplorer.application.ports.records_repository import (
    FinancialRecordsRepositoryPort,
)
from finexplorer.domain.constants import DEFAULT_LANGUAGE
from finexplorer.domain.models.code_tree import CodeTree
from finexplorer.domain.models.records import AggregationResult
from finexplorer.domain.services.aggregation import aggregate
from finexplorer.domain.services.code_tree import build_tree
from finexplorer.infrastructure.logging.logger import get_app_logger


class GetAggregatedDataUseCase:
    """Load code definitions and records, then aggregate them."""

    def __init__(
        self,
        code_definitions_repository: CodeDefinitionsRepositoryPort,
        records_repository: FinancialRecordsRepositoryPort,
        logger=None,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        """Initialize the use case.

        Args:
            code_definitions_repository: Source of the code definitions.
            records_repository: Source of the flat financial records.
            logger: Optional logger compatible with logging.Logger-like API.
            language: Language used for the aggregated labels.
        """
        self._definitions = code_definitions_repository
        self._records = records_repository
        self._logger = logger or get_app_logger()
        self._language = language

    def load_tree(self, dimension: str, model: str) -> CodeTree:
        """Build the code tree of a dimension and model."""
        entries = self._definitions.fetch_code_definitions(dimension, model)
        tree = build_tree(entries)
        self._logger.info(
            f"Built code tree for {dimension}/{model}: "
            f"{tree.total_nodes} nodes, depth {tree.max_depth}"
        )
        return tree

    def execute(
        self,
        dimension: str,
        model: str,
        entity_ids: Sequence[str] | None = None,
        years: Sequence[str] | None = None,
    ) -> AggregationResult:
        """Return the aggregated data of the requested entities and years.

        Args:
            dimension: Dimension of definitions and records.
            model: Accounting model of the code definitions.
            entity_ids: Restrict to these entities when provided.
            years: Restrict to these years when provided.

        Returns:
            AggregationResult: Aggregated data with unmatched codes.
        """
        tree = self.load_tree(dimension, model)
        records = self._records.fetch_records(
            dimension,
            entity_ids=entity_ids,
            years=years,
        )
        result = aggregate(
            tree,
            records,
            dimension=dimension,
            language=self._language,
            logger=self._logger,
        )
        self._logger.info(
            f"Aggregated {result.total_records} records into "
            f"{result.group_count} entity/year groups"
        )
        return result


__all__ = ["GetAggregatedDataUseCase"]
