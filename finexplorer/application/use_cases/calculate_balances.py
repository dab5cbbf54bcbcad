"""Use case to balance income against expenses per entity."""

from collections.abc import Sequence

from finexplorer.application.ports.code_definitions_repository import (
    CodeDefinitionsRepositoryPort,
)
from finexplorer.application.ports.records_repository import (
    FinancialRecordsRepositoryPort,
)
from finexplorer.domain.constants import (
    DEFAULT_LANGUAGE,
    EXPENSE_DIMENSIONS,
    INCOME_DIMENSIONS,
)
from finexplorer.domain.models.balance import BalanceReport
from finexplorer.domain.models.records import FlatRecord
from finexplorer.domain.services.balance import calculate_balances
from finexplorer.domain.services.code_tree import build_tree
from finexplorer.infrastructure.logging.logger import get_app_logger


class CalculateBalancesUseCase:
    """Load income and expense records and balance them per entity."""

    def __init__(
        self,
        records_repository: FinancialRecordsRepositoryPort,
        code_definitions_repository: CodeDefinitionsRepositoryPort | None = None,
        logger=None,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        """Initialize the use case.

        Args:
            records_repository: Source of the flat financial records.
            code_definitions_repository: Optional source of category
                labels for the breakdowns.
            logger: Optional logger compatible with logging.Logger-like API.
            language: Language of the category labels.
        """
        self._records = records_repository
        self._definitions = code_definitions_repository
        self._logger = logger or get_app_logger()
        self._language = language

    def execute(
        self,
        model: str,
        income_dimensions: Sequence[str] = INCOME_DIMENSIONS,
        expense_dimensions: Sequence[str] = EXPENSE_DIMENSIONS,
        entity_ids: Sequence[str] | None = None,
        year: str | None = None,
    ) -> BalanceReport:
        """Return the balances of the requested entities.

        Args:
            model: Accounting model of the code definitions.
            income_dimensions: Dimensions holding income records.
            expense_dimensions: Dimensions holding expense records.
            entity_ids: Restrict to these entities when provided.
            year: Year to balance, the most recent one when not set.

        Returns:
            BalanceReport: Balance per entity and totals per entity type.

        Raises:
            ValidationError: If no records were found.
        """
        records: list[FlatRecord] = []
        descriptions: dict[tuple[str, str], str] = {}
        for dimension in (*income_dimensions, *expense_dimensions):
            records.extend(
                self._records.fetch_records(
                    dimension,
                    entity_ids=entity_ids,
                    years=[year] if year else None,
                )
            )
            if self._definitions is not None:
                descriptions.update(self._labels(dimension, model))

        report = calculate_balances(
            records,
            year=year,
            income_dimensions=income_dimensions,
            expense_dimensions=expense_dimensions,
            descriptions=descriptions,
        )
        self._logger.info(
            f"Balanced {len(records)} records for "
            f"{len(report.balances)} entities in {report.year}"
        )
        return report

    def _labels(self, dimension: str, model: str) -> dict[tuple[str, str], str]:
        entries = self._definitions.fetch_code_definitions(dimension, model)
        labels: dict[tuple[str, str], str] = {}
        for node in build_tree(entries).iter_nodes():
            labels.setdefault((dimension, node.code), node.label(self._language))
        return labels


__all__ = ["CalculateBalancesUseCase"]
