"""Percentage and absolute change between selected financial values."""

from collections.abc import Iterable
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from finexplorer.domain.constants import COLUMN_ROW_CODE
from finexplorer.domain.errors import ValidationError
from finexplorer.domain.models.comparison import (
    ActiveComparison,
    ComparisonCalculation,
    ComparisonKey,
    ComparisonPoint,
    RowComparison,
)
from finexplorer.domain.models.records import AggregatedDatum
from finexplorer.utils.decimal_utils import coerce_decimal, is_finite_number

ZERO_BASE_MESSAGE = "Cannot calculate percentage change from zero"
INVALID_VALUES_MESSAGE = "Invalid numeric values"

_PAIR_SEPARATOR = "|"
_FIELD_SEPARATOR = ","


def calculate_comparison(base_value, target_value) -> ComparisonCalculation:
    """Compute the change from a base value to a target value.

    Args:
        base_value: Reference value.
        target_value: Compared value.

    Returns:
        ComparisonCalculation: Absolute change, and percentage change when
        the base is non-zero. A zero base yields ``is_valid=False``.
    """
    if not (is_finite_number(base_value) and is_finite_number(target_value)):
        return ComparisonCalculation(
            percentage_change=None,
            absolute_change=Decimal("0"),
            is_valid=False,
            error_message=INVALID_VALUES_MESSAGE,
        )
    base = coerce_decimal(base_value)
    target = coerce_decimal(target_value)
    absolute_change = target - base
    if base == 0:
        return ComparisonCalculation(
            percentage_change=None,
            absolute_change=absolute_change,
            is_valid=False,
            error_message=ZERO_BASE_MESSAGE,
        )
    return ComparisonCalculation(
        percentage_change=absolute_change / base * 100,
        absolute_change=absolute_change,
        is_valid=True,
    )


def comparison_id(base: ComparisonPoint, target: ComparisonPoint) -> str:
    """Return a deterministic identifier for a comparison pair."""
    return (
        f"{base.row_code}:{base.entity_code}>"
        f"{target.row_code}:{target.entity_code}"
    )


def create_comparison(
    base: ComparisonPoint,
    target: ComparisonPoint,
    *,
    created_at: datetime | None = None,
) -> ActiveComparison:
    """Create an active comparison between two selected points.

    Args:
        base: Reference selection.
        target: Compared selection.
        created_at: Creation timestamp, defaults to now (UTC).

    Returns:
        ActiveComparison: Comparison carrying the computed changes. Invalid
        comparisons keep their error message instead of raising.
    """
    calculation = calculate_comparison(base.value, target.value)
    return ActiveComparison(
        id=comparison_id(base, target),
        base=base,
        target=target,
        percentage_change=calculation.percentage_change,
        absolute_change=calculation.absolute_change,
        is_valid=calculation.is_valid,
        created_at=created_at or datetime.now(timezone.utc),
        error_message=calculation.error_message,
    )


def compare_columns(
    data: Iterable[AggregatedDatum],
    base_entity_id: str,
    target_entity_id: str,
    *,
    base_year: str | None = None,
    target_year: str | None = None,
) -> list[RowComparison]:
    """Compare every row of a base column with a target column.

    Rows follow the base column order. Rows missing from the target column
    are skipped, since missing data is not the same as zero.

    Args:
        data: Aggregated data containing both columns.
        base_entity_id: Entity of the base column.
        target_entity_id: Entity of the target column.
        base_year: Year of the base column, any year when None.
        target_year: Year of the target column, any year when None.

    Returns:
        list[RowComparison]: One comparison per shared row code.
    """
    base_rows: dict[str, AggregatedDatum] = {}
    target_rows: dict[str, AggregatedDatum] = {}
    for datum in data:
        if datum.entity_id == base_entity_id and base_year in (None, datum.year):
            base_rows.setdefault(datum.code, datum)
        if datum.entity_id == target_entity_id and target_year in (
            None,
            datum.year,
        ):
            target_rows.setdefault(datum.code, datum)

    comparisons: list[RowComparison] = []
    for code, base in base_rows.items():
        target = target_rows.get(code)
        if target is None:
            continue
        calculation = calculate_comparison(base.value, target.value)
        comparisons.append(
            RowComparison(
                row_code=code,
                row_display_name=base.label,
                base_value=base.value,
                target_value=target.value,
                percentage_change=calculation.percentage_change,
                absolute_change=calculation.absolute_change,
                is_valid=calculation.is_valid,
                error_message=calculation.error_message,
            )
        )
    return comparisons


def format_percentage_change(
    percentage_change: Decimal | None,
    decimal_places: int = 1,
) -> str:
    """Format a percentage change as signed text, ``N/A`` when undefined."""
    if percentage_change is None or not is_finite_number(percentage_change):
        return "N/A"
    quantum = Decimal(1).scaleb(-decimal_places)
    rounded = coerce_decimal(percentage_change).quantize(
        quantum,
        rounding=ROUND_HALF_UP,
    )
    if rounded == 0:
        rounded = rounded.copy_abs()
    sign = "+" if rounded >= 0 else ""
    return f"{sign}{rounded}%"


def format_absolute_change(
    absolute_change: Decimal | None,
    currency: str = "CHF",
) -> str:
    """Format an absolute change with Swiss digit grouping."""
    if absolute_change is None or not is_finite_number(absolute_change):
        return "N/A"
    rounded = coerce_decimal(absolute_change).quantize(
        Decimal("1"),
        rounding=ROUND_HALF_UP,
    )
    sign = "+" if rounded >= 0 else "-"
    grouped = f"{abs(rounded):,}".replace(",", "'")
    return f"{sign}{currency} {grouped}"


def parse_comparisons(text: str | None) -> list[ComparisonKey]:
    """Parse the compact comparison form ``row,entityA,entityB|...``.

    A pair with only two fields is a column comparison and gets the
    wildcard row code.

    Args:
        text: Serialized comparisons, possibly empty.

    Returns:
        list[ComparisonKey]: Parsed pairs in their serialized order.

    Raises:
        ValidationError: If a pair has the wrong number of fields or an
            empty field.
    """
    if not text or not text.strip():
        return []
    keys: list[ComparisonKey] = []
    for position, raw_pair in enumerate(text.split(_PAIR_SEPARATOR), start=1):
        fields = [part.strip() for part in raw_pair.split(_FIELD_SEPARATOR)]
        if len(fields) == 2:
            fields.insert(0, COLUMN_ROW_CODE)
        if len(fields) != 3 or not all(fields):
            raise ValidationError(
                f"Comparison {position} ({raw_pair.strip()!r}) must have the "
                "form 'rowCode,entityCodeA,entityCodeB'"
            )
        keys.append(
            ComparisonKey(
                row_code=fields[0],
                base_entity_code=fields[1],
                target_entity_code=fields[2],
            )
        )
    return keys


def format_comparisons(keys: Iterable[ComparisonKey]) -> str:
    """Serialize comparison pairs into the compact textual form."""
    return _PAIR_SEPARATOR.join(
        _FIELD_SEPARATOR.join(
            (key.row_code, key.base_entity_code, key.target_entity_code)
        )
        for key in keys
    )


__all__ = [
    "ZERO_BASE_MESSAGE",
    "INVALID_VALUES_MESSAGE",
    "calculate_comparison",
    "comparison_id",
    "create_comparison",
    "compare_columns",
    "format_percentage_change",
    "format_absolute_change",
    "parse_comparisons",
    "format_comparisons",
]
