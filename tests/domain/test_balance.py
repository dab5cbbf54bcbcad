"""Tests for income and expense balances."""

from decimal import Decimal

import pytest

from finexplorer.domain.errors import ValidationError
from finexplorer.domain.models.balance import EntityType
from finexplorer.domain.models.records import FlatRecord
from finexplorer.domain.services.balance import (
    calculate_balances,
    compare_balances,
    entity_balance,
    entity_type_for,
)


def _record(entity: str, dimension: str, code: str, value, year="2022"):
    return FlatRecord(
        entity_id=entity,
        year=year,
        code=code,
        value=Decimal(str(value)),
        dimension=dimension,
    )


def _records():
    return [
        _record("gdn_261", "einnahmen", "40", 1000),
        _record("gdn_261", "einnahmen", "46", 250),
        _record("gdn_261", "ausgaben", "30", 800),
        _record("gdn_261", "bilanz", "10", 99999),
        _record("gdn_351", "ertrag", "40", 500),
        _record("gdn_351", "aufwand", "30", 700),
        _record("ktn_zh", "einnahmen", "40", 9000),
        _record("ktn_zh", "ausgaben", "31", 4000),
        _record("gdn_261", "einnahmen", "40", 1, year="2020"),
    ]


def test_entity_type_follows_the_id_prefix() -> None:
    assert entity_type_for("gdn_261") is EntityType.MUNICIPALITY
    assert entity_type_for("ktn_zh") is EntityType.STATE
    assert entity_type_for("261") is EntityType.STATE


def test_calculate_balances_sums_income_and_expenses() -> None:
    """Other dimensions and other years should not count."""
    report = calculate_balances(_records())

    assert report.year == "2022"
    zurich_city = report.balance_for("gdn_261")
    assert zurich_city.total_income == Decimal("1250")
    assert zurich_city.total_expenses == Decimal("800")
    assert zurich_city.balance == Decimal("450")
    assert report.balance_for("gdn_351").balance == Decimal("-200")

    municipalities = report.totals[EntityType.MUNICIPALITY]
    assert municipalities.entity_count == 2
    assert municipalities.balance == Decimal("250")
    assert report.totals[EntityType.STATE].total_income == Decimal("9000")


def test_breakdown_is_sorted_by_absolute_amount() -> None:
    records = [
        _record("gdn_1", "einnahmen", "46", 30),
        _record("gdn_1", "einnahmen", "40", -80),
        _record("gdn_1", "einnahmen", "46", 20),
    ]

    report = calculate_balances(
        records,
        descriptions={("einnahmen", "40"): "Fiskalertrag"},
    )

    breakdown = report.balances[0].income_breakdown
    assert [(c.code, c.description, c.amount) for c in breakdown] == [
        ("40", "Fiskalertrag", Decimal("-80")),
        ("46", "46", Decimal("50")),
    ]
    assert report.balances[0].expense_breakdown == ()


def test_calculate_balances_filters_year_and_entity_type() -> None:
    report = calculate_balances(
        _records(),
        year="2020",
        entity_types=[EntityType.MUNICIPALITY],
        include_breakdown=False,
    )

    assert [b.entity_id for b in report.balances] == ["gdn_261"]
    assert report.balances[0].total_income == Decimal("1")
    assert report.balances[0].income_breakdown == ()
    assert report.totals[EntityType.STATE].entity_count == 0


def test_calculate_balances_rejects_missing_data() -> None:
    with pytest.raises(ValidationError, match="No financial records"):
        calculate_balances([])
    with pytest.raises(ValidationError, match="year 1999"):
        calculate_balances(_records(), year="1999")


def test_entity_balance_and_comparison() -> None:
    records = _records()

    assert entity_balance(records, "unknown") is None
    assert entity_balance(records, "ktn_zh").balance == Decimal("5000")

    comparison = compare_balances(records, "gdn_261", "gdn_351")
    assert comparison.income_difference == Decimal("750")
    assert comparison.expense_difference == Decimal("100")
    assert comparison.balance_difference == Decimal("650")
    assert comparison.income_ratio == Decimal("2.5")
    assert compare_balances(records, "gdn_261", "unknown") is None


def test_comparison_ratio_is_undefined_for_zero_amounts() -> None:
    records = [
        _record("gdn_1", "einnahmen", "40", 10),
        _record("gdn_2", "ausgaben", "30", 10),
    ]

    comparison = compare_balances(records, "gdn_1", "gdn_2")

    assert comparison.income_ratio is None
    assert comparison.expense_ratio == Decimal("0")
