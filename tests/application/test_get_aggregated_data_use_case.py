"""Tests for the GetAggregatedDataUseCase."""

from decimal import Decimal
from unittest.mock import MagicMock

from finexplorer.application.use_cases.get_aggregated_data import (
    GetAggregatedDataUseCase,
)
from finexplorer.domain.models.code_tree import CodeEntry
from finexplorer.domain.models.records import FlatRecord


def _definitions_repository() -> MagicMock:
    repository = MagicMock()
    repository.fetch_code_definitions.return_value = [
        CodeEntry(code="1", labels={"de": "Ertrag", "fr": "Revenus"}),
        CodeEntry(code="10", labels={"de": "Steuern"}),
        CodeEntry(code="11", labels={"de": "Gebühren"}),
    ]
    return repository


def _records_repository(records) -> MagicMock:
    repository = MagicMock()
    repository.fetch_records.return_value = records
    return repository


def test_execute_builds_tree_and_aggregates_records() -> None:
    """The use case should aggregate the records it loads."""
    definitions = _definitions_repository()
    records = _records_repository(
        [
            FlatRecord("261", "2022", "10", Decimal("100"), "fs"),
            FlatRecord("261", "2022", "11", Decimal("50"), "fs"),
        ]
    )
    logger = MagicMock()

    use_case = GetAggregatedDataUseCase(
        code_definitions_repository=definitions,
        records_repository=records,
        logger=logger,
        language="fr",
    )
    result = use_case.execute("fs", "fs", entity_ids=["261"], years=["2022"])

    values = {datum.code: datum.value for datum in result.data}
    assert values == {
        "root": Decimal("150"),
        "1": Decimal("150"),
        "10": Decimal("100"),
        "11": Decimal("50"),
    }
    assert result.data[1].label == "Revenus"
    definitions.fetch_code_definitions.assert_called_once_with("fs", "fs")
    records.fetch_records.assert_called_once_with(
        "fs",
        entity_ids=["261"],
        years=["2022"],
    )
    assert logger.info.call_count == 2


def test_execute_logs_unmatched_codes() -> None:
    records = _records_repository(
        [FlatRecord("261", "2022", "77", Decimal("9"), "fs")]
    )
    logger = MagicMock()

    use_case = GetAggregatedDataUseCase(
        _definitions_repository(),
        records,
        logger=logger,
    )
    result = use_case.execute("fs", "fs")

    assert [item.code for item in result.unmatched] == ["77"]
    logger.warning.assert_called_once()


def test_load_tree_reports_tree_size() -> None:
    logger = MagicMock()
    use_case = GetAggregatedDataUseCase(
        _definitions_repository(),
        _records_repository([]),
        logger=logger,
    )

    tree = use_case.load_tree("fs", "fs")

    assert tree.total_nodes == 4
    assert "4 nodes" in logger.info.call_args.args[0]
