"""Income and expense balances of governmental entities.

Records of income dimensions (``einnahmen``, ``ertrag``, ...) count as
income, records of expense dimensions (``ausgaben``, ``aufwand``, ...) as
expenses; records of other dimensions are ignored. Entity ids starting with
``gdn_`` are municipalities, all others cantons or the federation.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal

from finexplorer.domain.constants import (
    EXPENSE_DIMENSIONS,
    INCOME_DIMENSIONS,
    MUNICIPALITY_PREFIX,
)
from finexplorer.domain.errors import ValidationError
from finexplorer.domain.models.balance import (
    BalanceComparison,
    BalanceReport,
    BalanceTotals,
    CategoryAmount,
    EntityBalance,
    EntityType,
)
from finexplorer.domain.models.records import FlatRecord
from finexplorer.domain.services.aggregation import year_sort_key
from finexplorer.utils.decimal_utils import coerce_decimal


def entity_type_for(entity_id: str) -> EntityType:
    if entity_id.startswith(MUNICIPALITY_PREFIX):
        return EntityType.MUNICIPALITY
    return EntityType.STATE


def calculate_balances(
    records: Iterable[FlatRecord],
    *,
    year: str | None = None,
    income_dimensions: Iterable[str] = INCOME_DIMENSIONS,
    expense_dimensions: Iterable[str] = EXPENSE_DIMENSIONS,
    entity_types: Iterable[EntityType] | None = None,
    descriptions: Mapping[tuple[str, str], str] | None = None,
    include_breakdown: bool = True,
) -> BalanceReport:
    """Compute income minus expenses for every entity of one year.

    Args:
        records: Flat records of income and expense dimensions.
        year: Year to balance; the most recent year of the records when
            not set.
        income_dimensions: Dimensions whose records are income.
        expense_dimensions: Dimensions whose records are expenses.
        entity_types: Only balance entities of these types.
        descriptions: Category descriptions keyed by
            ``(dimension, code)``; the code is used when missing.
        include_breakdown: Also sum income and expenses per account code.

    Returns:
        BalanceReport: One balance per entity and totals per entity type.

    Raises:
        ValidationError: If there are no records, or none for ``year``.
    """
    rows = list(records)
    if not rows:
        raise ValidationError("No financial records to balance")
    if year is None:
        year = max((record.year for record in rows), key=year_sort_key)
    rows = [record for record in rows if record.year == year]
    if not rows:
        raise ValidationError(f"No financial records found for year {year}")

    wanted_types = set(entity_types) if entity_types is not None else None
    grouped: dict[str, list[FlatRecord]] = {}
    for record in rows:
        if (
            wanted_types is not None
            and entity_type_for(record.entity_id) not in wanted_types
        ):
            continue
        grouped.setdefault(record.entity_id, []).append(record)

    income = set(income_dimensions)
    expenses = set(expense_dimensions)
    labels = descriptions or {}
    balances = []
    for entity_id, entity_records in grouped.items():
        income_records = [r for r in entity_records if r.dimension in income]
        expense_records = [
            r for r in entity_records if r.dimension in expenses
        ]
        balances.append(
            EntityBalance(
                entity_id=entity_id,
                entity_type=entity_type_for(entity_id),
                year=year,
                total_income=_total(income_records),
                total_expenses=_total(expense_records),
                income_breakdown=(
                    _breakdown(income_records, labels)
                    if include_breakdown
                    else ()
                ),
                expense_breakdown=(
                    _breakdown(expense_records, labels)
                    if include_breakdown
                    else ()
                ),
            )
        )

    totals = {}
    for entity_type in EntityType:
        of_type = [b for b in balances if b.entity_type is entity_type]
        totals[entity_type] = BalanceTotals(
            total_income=sum(
                (b.total_income for b in of_type), Decimal("0")
            ),
            total_expenses=sum(
                (b.total_expenses for b in of_type), Decimal("0")
            ),
            entity_count=len(of_type),
        )
    return BalanceReport(year=year, balances=tuple(balances), totals=totals)


def entity_balance(
    records: Iterable[FlatRecord],
    entity_id: str,
    *,
    year: str | None = None,
    income_dimensions: Iterable[str] = INCOME_DIMENSIONS,
    expense_dimensions: Iterable[str] = EXPENSE_DIMENSIONS,
    descriptions: Mapping[tuple[str, str], str] | None = None,
) -> EntityBalance | None:
    """Return the balance of one entity, None when it has no records."""
    own = [record for record in records if record.entity_id == entity_id]
    if not own:
        return None
    report = calculate_balances(
        own,
        year=year,
        income_dimensions=income_dimensions,
        expense_dimensions=expense_dimensions,
        descriptions=descriptions,
    )
    return report.balance_for(entity_id)


def compare_balances(
    records: Iterable[FlatRecord],
    first_id: str,
    second_id: str,
    *,
    year: str | None = None,
    income_dimensions: Iterable[str] = INCOME_DIMENSIONS,
    expense_dimensions: Iterable[str] = EXPENSE_DIMENSIONS,
) -> BalanceComparison | None:
    """Compare the balances of two entities.

    Without a year each entity is balanced on its own most recent year.

    Returns:
        BalanceComparison | None: None when either entity has no records.
    """
    rows = list(records)
    options = {
        "year": year,
        "income_dimensions": tuple(income_dimensions),
        "expense_dimensions": tuple(expense_dimensions),
    }
    first = entity_balance(rows, first_id, **options)
    second = entity_balance(rows, second_id, **options)
    if first is None or second is None:
        return None
    return BalanceComparison(
        first=first,
        second=second,
        income_difference=first.total_income - second.total_income,
        expense_difference=first.total_expenses - second.total_expenses,
        balance_difference=first.balance - second.balance,
        income_ratio=_ratio(first.total_income, second.total_income),
        expense_ratio=_ratio(first.total_expenses, second.total_expenses),
    )


def _total(records: list[FlatRecord]) -> Decimal:
    return sum((coerce_decimal(r.value) for r in records), Decimal("0"))


def _breakdown(
    records: list[FlatRecord],
    descriptions: Mapping[tuple[str, str], str],
) -> tuple[CategoryAmount, ...]:
    amounts: dict[str, Decimal] = {}
    labels: dict[str, str] = {}
    for record in records:
        code = record.code.strip()
        amounts[code] = amounts.get(code, Decimal("0")) + coerce_decimal(
            record.value
        )
        labels.setdefault(
            code,
            descriptions.get((record.dimension, code), code),
        )
    categories = [
        CategoryAmount(code=code, description=labels[code], amount=amount)
        for code, amount in amounts.items()
    ]
    # Stable sort keeps first-seen order among equal amounts.
    return tuple(sorted(categories, key=lambda c: abs(c.amount), reverse=True))


def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal | None:
    if denominator == 0:
        return None
    return numerator / denominator


__all__ = [
    "entity_type_for",
    "calculate_balances",
    "entity_balance",
    "compare_balances",
]
