"""CLI adapter printing the aggregated code tree of an entity."""

import os

from finexplorer.infrastructure.container import (
    build_aggregated_data_use_case,
)
from finexplorer.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from finexplorer.infrastructure.settings import ExplorerSettings


def _parse_list(value: str | None) -> list[str] | None:
    """Split a comma separated environment value into its items."""
    if not value:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


def main() -> None:
    """Aggregate the configured entities and print the first column."""
    logger = get_app_logger()
    settings = ExplorerSettings.from_env()
    entity_ids = _parse_list(os.getenv("FINEXPLORER_ENTITIES"))
    year = os.getenv("FINEXPLORER_YEAR") or None

    get_usage_logger().info(
        f"aggregate entities={entity_ids} year={year} "
        f"dimension={settings.dimension} model={settings.model}"
    )
    use_case = build_aggregated_data_use_case(settings=settings)
    result = use_case.execute(
        settings.dimension,
        settings.model,
        entity_ids=entity_ids,
        years=[year] if year else None,
    )
    if not result.data:
        logger.warning("No financial records matched the selection.")
        print("No aggregated data.")
        return

    first = result.data[0]
    print(
        f"Aggregated {first.entity_id} ({first.year}), "
        f"dimension={settings.dimension}, model={settings.model}"
    )
    for datum in result.data:
        if (datum.entity_id, datum.year) != (first.entity_id, first.year):
            continue
        indent = "  " * datum.level
        print(f"{indent}{datum.code} {datum.label}: {datum.value}")
    print(f"Unmatched codes: {len(result.unmatched)}")


if __name__ == "__main__":  # pragma: no cover
    main()
