"""Tests for the tree aggregator."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from finexplorer.domain.errors import DataMismatchError
from finexplorer.domain.models.code_tree import CodeEntry
from finexplorer.domain.models.records import FlatRecord
from finexplorer.domain.services.aggregation import (
    aggregate,
    index_by_code,
    values_for_codes,
)
from finexplorer.domain.services.code_tree import build_tree


def _revenue_tree():
    return build_tree(
        [
            CodeEntry(code="1", labels={"de": "Revenue"}),
            CodeEntry(code="10", labels={"de": "Tax"}),
            CodeEntry(code="11", labels={"de": "Fees"}),
        ]
    )


def _record(code: str, value, entity: str = "261", year: str = "2022"):
    return FlatRecord(
        entity_id=entity,
        year=year,
        code=code,
        value=Decimal(str(value)),
        dimension="fs",
    )


def _values(result, entity: str = "261", year: str = "2022") -> dict:
    return {
        datum.code: datum.value
        for datum in result.data
        if (datum.entity_id, datum.year) == (entity, year)
    }


def test_aggregate_sums_children_into_parents() -> None:
    """Parents should hold the sum of their subtree."""
    result = aggregate(
        _revenue_tree(),
        [_record("10", 100), _record("11", 50)],
    )

    values = _values(result)
    assert values == {
        "root": Decimal("150"),
        "1": Decimal("150"),
        "10": Decimal("100"),
        "11": Decimal("50"),
    }
    assert result.total_records == 2
    assert result.group_count == 1
    assert result.has_warnings is False


def test_aggregate_emits_every_node_in_pre_order() -> None:
    """Each group should list every node, zero values included."""
    result = aggregate(_revenue_tree(), [_record("11", 7)])

    assert [datum.code for datum in result.data] == ["root", "1", "10", "11"]
    assert _values(result)["10"] == Decimal("0")
    assert [datum.level for datum in result.data] == [0, 1, 2, 2]
    assert [datum.has_direct_value for datum in result.data] == [
        False,
        False,
        False,
        True,
    ]


def test_aggregate_adds_parent_records_to_children_sum() -> None:
    """A record on an inner node should add to the subtree total."""
    result = aggregate(
        _revenue_tree(),
        [_record("1", 5), _record("10", 100), _record("10", 1)],
    )

    values = _values(result)
    assert values["10"] == Decimal("101")
    assert values["1"] == Decimal("106")
    assert values["root"] == Decimal("106")


def test_aggregate_groups_by_entity_and_year() -> None:
    """Values of different entities or years must not mix."""
    records = [
        _record("10", 100, entity="261", year="2022"),
        _record("10", 80, entity="261", year="2021"),
        _record("11", 30, entity="351", year="2022"),
    ]

    result = aggregate(_revenue_tree(), records)

    assert result.group_count == 3
    assert _values(result, "261", "2022")["root"] == Decimal("100")
    assert _values(result, "261", "2021")["root"] == Decimal("80")
    assert _values(result, "351", "2022")["root"] == Decimal("30")


def test_aggregate_root_equals_sum_of_matched_records() -> None:
    """Every matched record should be counted exactly once in the root."""
    tree = build_tree(
        [
            CodeEntry(code="3", labels={}),
            CodeEntry(code="30", labels={}),
            CodeEntry(code="300", labels={}),
            CodeEntry(code="30", labels={"de": "duplicate"}),
            CodeEntry(code="4", labels={}),
        ]
    )
    records = [
        _record("300", 10),
        _record("30", 20),
        _record("3", 5),
        _record("4", "12.5"),
    ]

    result = aggregate(tree, records)

    assert _values(result)["root"] == Decimal("47.5")


def test_aggregate_is_idempotent() -> None:
    records = [_record("10", 100), _record("11", 50)]
    tree = _revenue_tree()

    assert aggregate(tree, records) == aggregate(tree, records)


def test_aggregate_reports_unmatched_codes_and_logs_warning() -> None:
    """Unknown codes should be skipped, reported and logged."""
    logger = MagicMock()

    result = aggregate(
        _revenue_tree(),
        [_record("10", 100), _record("99", 3)],
        logger=logger,
    )

    assert _values(result)["root"] == Decimal("100")
    assert result.has_warnings is True
    assert [item.code for item in result.unmatched] == ["99"]
    assert result.unmatched[0].value == Decimal("3")
    logger.warning.assert_called_once()
    assert "99" in logger.warning.call_args.args[0]


def test_aggregate_strict_mode_raises_on_unknown_code() -> None:
    with pytest.raises(DataMismatchError) as excinfo:
        aggregate(_revenue_tree(), [_record("99", 3)], strict=True)

    assert excinfo.value.code == "99"
    assert excinfo.value.entity_id == "261"


def test_aggregate_filters_dimension_and_localizes_labels() -> None:
    tree = build_tree(
        [CodeEntry(code="1", labels={"de": "Ertrag", "fr": "Revenus"})]
    )
    records = [
        _record("1", 10),
        FlatRecord(
            entity_id="261",
            year="2022",
            code="1",
            value=Decimal("99"),
            dimension="other",
        ),
    ]

    result = aggregate(tree, records, dimension="fs", language="fr")

    assert _values(result)["1"] == Decimal("10")
    assert result.total_records == 1
    labels = {datum.code: datum.label for datum in result.data}
    assert labels == {"root": "Total", "1": "Revenus"}


def test_aggregate_without_records_returns_empty_result() -> None:
    result = aggregate(_revenue_tree(), [])

    assert result.data == ()
    assert result.group_count == 0


def test_aggregate_rejects_missing_tree() -> None:
    with pytest.raises(TypeError):
        aggregate(None, [])


def test_values_for_codes_sums_codes_per_entity() -> None:
    """Summing codes should use the aggregated subtree values."""
    records = [
        _record("10", 100, entity="261"),
        _record("11", 50, entity="261"),
        _record("11", 20, entity="351"),
    ]
    result = aggregate(_revenue_tree(), records)

    assert values_for_codes(result.data, ["10", "11"]) == {
        "261": Decimal("150"),
        "351": Decimal("20"),
    }
    assert values_for_codes(result.data, ["1"], year="2021") == {}


def test_values_for_codes_can_keep_only_the_latest_year() -> None:
    records = [
        _record("10", 100, entity="261", year="2021"),
        _record("10", 120, entity="261", year="2022"),
        _record("10", 40, entity="351", year="2021"),
    ]
    result = aggregate(_revenue_tree(), records)

    assert values_for_codes(result.data, ["10"]) == {
        "261": Decimal("220"),
        "351": Decimal("40"),
    }
    assert values_for_codes(result.data, ["10"], latest_year=True) == {
        "261": Decimal("120"),
        "351": Decimal("40"),
    }
    assert values_for_codes(
        result.data, ["10"], year="2021", latest_year=True
    ) == {"261": Decimal("100"), "351": Decimal("40")}


def test_index_by_code_keys_by_entity_year_and_code() -> None:
    result = aggregate(_revenue_tree(), [_record("10", 100)])

    index = index_by_code(result.data)

    assert index[("261", "2022", "1")].value == Decimal("100")
    assert index[("261", "2022", "1")].label == "Revenue"
