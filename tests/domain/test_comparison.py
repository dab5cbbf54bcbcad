"""Tests for the comparison engine."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from finexplorer.domain.errors import ValidationError
from finexplorer.domain.models.comparison import ComparisonKey, ComparisonPoint
from finexplorer.domain.models.records import AggregatedDatum
from finexplorer.domain.services.comparison import (
    INVALID_VALUES_MESSAGE,
    ZERO_BASE_MESSAGE,
    calculate_comparison,
    compare_columns,
    create_comparison,
    format_absolute_change,
    format_comparisons,
    format_percentage_change,
    parse_comparisons,
)


def test_calculate_comparison_returns_relative_and_absolute_change() -> None:
    result = calculate_comparison(Decimal("200"), Decimal("250"))

    assert result.is_valid is True
    assert result.percentage_change == Decimal("25")
    assert result.absolute_change == Decimal("50")
    assert result.error_message is None


def test_calculate_comparison_with_zero_base_is_invalid() -> None:
    """A zero base should not raise and should explain why."""
    result = calculate_comparison(Decimal("0"), Decimal("10"))

    assert result.is_valid is False
    assert result.percentage_change is None
    assert result.absolute_change == Decimal("10")
    assert result.error_message == ZERO_BASE_MESSAGE


def test_calculate_comparison_rejects_non_finite_values() -> None:
    result = calculate_comparison(float("nan"), 10)

    assert result.is_valid is False
    assert result.error_message == INVALID_VALUES_MESSAGE


def test_absolute_change_is_antisymmetric() -> None:
    forward = calculate_comparison(Decimal("80"), Decimal("130.5"))
    backward = calculate_comparison(Decimal("130.5"), Decimal("80"))

    assert forward.absolute_change == -backward.absolute_change


def test_create_comparison_carries_points_and_id() -> None:
    created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    base = ComparisonPoint(row_code="36", entity_code="261", value=Decimal("4"))
    target = ComparisonPoint(
        row_code="36",
        entity_code="351",
        value=Decimal("5"),
    )

    comparison = create_comparison(base, target, created_at=created_at)

    assert comparison.id == "36:261>36:351"
    assert comparison.percentage_change == Decimal("25")
    assert comparison.created_at == created_at
    assert comparison.key == ("36", "261", "36", "351")


def _datum(entity: str, code: str, value: str, year: str = "2022"):
    return AggregatedDatum(
        entity_id=entity,
        year=year,
        code=code,
        label=f"label {code}",
        value=Decimal(value),
    )


def test_compare_columns_matches_rows_of_both_entities() -> None:
    """Rows missing from the target column should be skipped."""
    data = [
        _datum("261", "root", "100"),
        _datum("261", "1", "100"),
        _datum("261", "2", "0"),
        _datum("351", "root", "150"),
        _datum("351", "2", "5"),
    ]

    rows = compare_columns(data, "261", "351")

    assert [row.row_code for row in rows] == ["root", "2"]
    assert rows[0].percentage_change == Decimal("50")
    assert rows[0].row_display_name == "label root"
    assert rows[1].is_valid is False
    assert rows[1].error_message == ZERO_BASE_MESSAGE


def test_compare_columns_can_compare_years_of_one_entity() -> None:
    data = [
        _datum("261", "root", "100", year="2021"),
        _datum("261", "root", "110", year="2022"),
    ]

    rows = compare_columns(
        data,
        "261",
        "261",
        base_year="2021",
        target_year="2022",
    )

    assert len(rows) == 1
    assert rows[0].absolute_change == Decimal("10")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("12.345"), "+12.3%"),
        (Decimal("-7.25"), "-7.3%"),
        (Decimal("-0.01"), "+0.0%"),
        (None, "N/A"),
    ],
)
def test_format_percentage_change(value, expected) -> None:
    assert format_percentage_change(value) == expected


def test_format_absolute_change_groups_thousands() -> None:
    assert format_absolute_change(Decimal("1234.6")) == "+CHF 1'235"
    assert format_absolute_change(Decimal("-1500000")) == "-CHF 1'500'000"
    assert format_absolute_change(None) == "N/A"


def test_parse_comparisons_reads_cell_and_column_pairs() -> None:
    """Two-field pairs should become column comparisons."""
    keys = parse_comparisons("36,261,351|261,230")

    assert keys == [
        ComparisonKey("36", "261", "351"),
        ComparisonKey("*", "261", "230"),
    ]


def test_parse_comparisons_of_empty_text_is_empty() -> None:
    assert parse_comparisons("") == []
    assert parse_comparisons(None) == []


def test_parse_comparisons_rejects_malformed_pairs() -> None:
    with pytest.raises(ValidationError) as excinfo:
        parse_comparisons("36,261,351|36,261,351,9")

    assert "Comparison 2" in str(excinfo.value)
    with pytest.raises(ValidationError):
        parse_comparisons("36,,351")


def test_format_comparisons_joins_pairs() -> None:
    text = format_comparisons(
        [ComparisonKey("36", "261", "351"), ComparisonKey("*", "261", "230")]
    )

    assert text == "36,261,351|*,261,230"
    assert parse_comparisons(text)[1].row_code == "*"
