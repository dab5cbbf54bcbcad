"""Use case to compare two entities row by row."""

from finexplorer.application.use_cases.get_aggregated_data import (
    GetAggregatedDataUseCase,
)
from finexplorer.domain.models.comparison import RowComparison
from finexplorer.domain.services.comparison import compare_columns
from finexplorer.infrastructure.logging.logger import get_app_logger


class CompareEntitiesUseCase:
    """Compare the aggregated columns of two entities."""

    def __init__(
        self,
        aggregated_data: GetAggregatedDataUseCase,
        logger=None,
    ) -> None:
        self._aggregated_data = aggregated_data
        self._logger = logger or get_app_logger()

    def execute(
        self,
        base_entity_id: str,
        target_entity_id: str,
        dimension: str,
        model: str,
        year: str | None = None,
    ) -> list[RowComparison]:
        """Return one comparison per row shared by both entities.

        Args:
            base_entity_id: Entity used as the base column.
            target_entity_id: Entity compared with the base.
            dimension: Dimension of definitions and records.
            model: Accounting model of the code definitions.
            year: Year of both columns, any year when None.

        Returns:
            list[RowComparison]: Row comparisons in tree order.
        """
        aggregation = self._aggregated_data.execute(
            dimension,
            model,
            entity_ids=[base_entity_id, target_entity_id],
            years=[year] if year else None,
        )
        comparisons = compare_columns(
            aggregation.data,
            base_entity_id,
            target_entity_id,
            base_year=year,
            target_year=year,
        )
        invalid = sum(1 for comparison in comparisons if not comparison.is_valid)
        if invalid:
            self._logger.warning(
                f"{invalid} of {len(comparisons)} rows could not be compared "
                f"between {base_entity_id} and {target_entity_id}"
            )
        return comparisons


__all__ = ["CompareEntitiesUseCase"]
