"""CLI adapter printing income, expenses and balance per entity."""

import os

from finexplorer.domain.constants import EXPENSE_DIMENSIONS, INCOME_DIMENSIONS
from finexplorer.domain.errors import ValidationError
from finexplorer.domain.services.comparison import format_absolute_change
from finexplorer.infrastructure.container import (
    build_calculate_balances_use_case,
)
from finexplorer.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from finexplorer.infrastructure.settings import ExplorerSettings


def _parse_list(value: str | None) -> list[str] | None:
    if not value:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


def main() -> None:
    """Balance the configured entities and print one line per entity."""
    logger = get_app_logger()
    settings = ExplorerSettings.from_env()
    income = _parse_list(os.getenv("FINEXPLORER_INCOME_DIMENSIONS"))
    expenses = _parse_list(os.getenv("FINEXPLORER_EXPENSE_DIMENSIONS"))
    entity_ids = _parse_list(os.getenv("FINEXPLORER_ENTITIES"))
    year = os.getenv("FINEXPLORER_YEAR") or None

    get_usage_logger().info(
        f"balance entities={entity_ids} year={year} model={settings.model}"
    )
    use_case = build_calculate_balances_use_case(settings=settings)
    try:
        report = use_case.execute(
            settings.model,
            income_dimensions=income or INCOME_DIMENSIONS,
            expense_dimensions=expenses or EXPENSE_DIMENSIONS,
            entity_ids=entity_ids,
            year=year,
        )
    except ValidationError as exc:
        logger.warning(f"Cannot calculate balances: {exc}")
        print("No balance data.")
        return

    print(f"Balances {report.year}")
    for balance in report.balances:
        print(
            f"{balance.entity_id} ({balance.entity_type.value}): "
            f"income={format_absolute_change(balance.total_income)}, "
            f"expenses={format_absolute_change(balance.total_expenses)}, "
            f"balance={format_absolute_change(balance.balance)}"
        )
    for entity_type, totals in report.totals.items():
        if totals.entity_count:
            print(
                f"Total {entity_type.value} ({totals.entity_count}): "
                f"{format_absolute_change(totals.balance)}"
            )


if __name__ == "__main__":  # pragma: no cover
    main()
