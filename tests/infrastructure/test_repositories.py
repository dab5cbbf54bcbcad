"""Tests for the SQLAlchemy repositories."""

from decimal import Decimal

from finexplorer.infrastructure.code_definitions_repository import (
    SqlAlchemyCodeDefinitionsRepository,
)
from finexplorer.infrastructure.records_repository import (
    SqlAlchemyFinancialRecordsRepository,
)
from finexplorer.infrastructure.scaling_repository import (
    SqlAlchemyScalingValuesRepository,
)


def test_code_definitions_are_filtered_and_labelled(finance_db) -> None:
    repository = SqlAlchemyCodeDefinitionsRepository(finance_db)

    entries = repository.fetch_code_definitions("fs", "fs")

    assert [entry.code for entry in entries] == ["1", "10"]
    assert entries[0].labels == {
        "de": "Ertrag",
        "fr": "Revenus",
        "it": "",
        "en": "Revenue",
    }


def test_records_are_filtered_by_dimension(finance_db) -> None:
    repository = SqlAlchemyFinancialRecordsRepository(finance_db)

    records = repository.fetch_records("fs")

    assert [(r.entity_id, r.year, r.code) for r in records] == [
        ("261", "2021", "10"),
        ("261", "2022", "10"),
        ("351", "2022", "10"),
    ]
    assert records[1].value == Decimal("100.5")
    assert all(record.dimension == "fs" for record in records)


def test_records_are_filtered_by_entities_and_years(finance_db) -> None:
    repository = SqlAlchemyFinancialRecordsRepository(finance_db)

    records = repository.fetch_records(
        "fs",
        entity_ids=["261"],
        years=["2022"],
    )

    assert len(records) == 1
    assert records[0].value == Decimal("100.5")


def test_scaling_values_use_latest_year_without_filter(finance_db) -> None:
    repository = SqlAlchemyScalingValuesRepository(finance_db)

    values = repository.fetch_scaling_values("population")

    assert values == {"261": Decimal("145000"), "351": Decimal("55000")}


def test_scaling_values_filter_by_year(finance_db) -> None:
    repository = SqlAlchemyScalingValuesRepository(finance_db)

    assert repository.fetch_scaling_values("population", year="2021") == {
        "261": Decimal("140000"),
    }
    assert repository.fetch_scaling_values("unknown") == {}


def test_list_metrics_returns_distinct_sorted_names(finance_db) -> None:
    repository = SqlAlchemyScalingValuesRepository(finance_db)

    assert repository.list_metrics() == ["population", "tax_base"]
