"""CLI adapter comparing two entities row by row."""

import os

from finexplorer.domain.services.comparison import (
    format_absolute_change,
    format_percentage_change,
)
from finexplorer.infrastructure.container import (
    build_compare_entities_use_case,
)
from finexplorer.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from finexplorer.infrastructure.settings import ExplorerSettings


def main() -> None:
    """Print the row comparisons of a base and a target entity."""
    logger = get_app_logger()
    base = os.getenv("FINEXPLORER_BASE_ENTITY", "").strip()
    target = os.getenv("FINEXPLORER_TARGET_ENTITY", "").strip()
    if not base or not target:
        logger.warning(
            "FINEXPLORER_BASE_ENTITY and FINEXPLORER_TARGET_ENTITY "
            "are required."
        )
        return
    year = os.getenv("FINEXPLORER_YEAR") or None
    settings = ExplorerSettings.from_env()

    get_usage_logger().info(
        f"compare_entities base={base} target={target} year={year}"
    )
    use_case = build_compare_entities_use_case(settings=settings)
    comparisons = use_case.execute(
        base,
        target,
        settings.dimension,
        settings.model,
        year=year,
    )

    print(f"Comparison {base} -> {target} (year={year})")
    for comparison in comparisons:
        change = (
            format_percentage_change(comparison.percentage_change)
            if comparison.is_valid
            else comparison.error_message
        )
        print(
            f"{comparison.row_code} {comparison.row_display_name}: "
            f"{format_absolute_change(comparison.absolute_change)} ({change})"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
