"""CLI adapter to fit a scaling coefficient for account-code groups."""

import os

from finexplorer.infrastructure.container import (
    build_optimize_scaling_use_case,
)
from finexplorer.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from finexplorer.infrastructure.settings import ExplorerSettings


def main() -> None:
    """Run the optimizer for the configured expression and metric."""
    logger = get_app_logger()
    expression = os.getenv("FINEXPLORER_ACCOUNT_CODES", "").strip()
    if not expression:
        logger.warning(
            "FINEXPLORER_ACCOUNT_CODES is required, e.g. '400+401,36'."
        )
        return
    metric = os.getenv("FINEXPLORER_SCALING_METRIC", "population").strip()
    year = os.getenv("FINEXPLORER_YEAR") or None
    settings = ExplorerSettings.from_env()

    get_usage_logger().info(
        f"optimize_scaling codes={expression} metric={metric} year={year}"
    )
    use_case = build_optimize_scaling_use_case(settings=settings)
    optimization = use_case.execute(
        expression,
        metric,
        settings.dimension,
        settings.model,
        year=year,
    )

    best = optimization.best
    print(f"Scaling fit for '{expression}' against {metric} (year={year})")
    print(
        f"Best group: {best.group_name}, status={best.status.value}, "
        f"coefficient={best.coefficient}, r_squared={best.r_squared}, "
        f"cv={best.coefficient_of_variation}, "
        f"entities={best.entity_count}, iterations={best.iterations}"
    )
    if best.error_message:
        print(f"Reason: {best.error_message}")
    for summary in optimization.summaries:
        print(
            f"{summary.group_name}: entities={summary.entity_count}, "
            f"cv before={summary.before_cv:.4f}, "
            f"after={summary.after_cv:.4f}, "
            f"improvement={summary.improvement:.1f}%"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
