"""Use case to find the scaling coefficient of account-code groups."""

from decimal import Decimal

from finexplorer.application.ports.scaling_repository import (
    ScalingValuesRepositoryPort,
)
from finexplorer.application.use_cases.get_aggregated_data import (
    GetAggregatedDataUseCase,
)
from finexplorer.domain.errors import ValidationError
from finexplorer.domain.models.optimization import (
    AccountCodeOptimization,
    OptimizationConfig,
    OptimizationResult,
    OptimizationStatus,
)
from finexplorer.domain.services.scaling import optimize_account_codes
from finexplorer.domain.services.scaling_formula import (
    custom_scaling_formula,
    evaluate_scaling_formula,
    parse_scaling_formula,
)
from finexplorer.infrastructure.logging.logger import get_app_logger


class OptimizeScalingUseCase:
    """Relate aggregated account codes to a reference metric."""

    def __init__(
        self,
        aggregated_data: GetAggregatedDataUseCase,
        scaling_repository: ScalingValuesRepositoryPort,
        config: OptimizationConfig | None = None,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            aggregated_data: Use case providing aggregated data.
            scaling_repository: Source of the reference metric.
            config: Optimizer thresholds, defaults when None.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._aggregated_data = aggregated_data
        self._scaling_repository = scaling_repository
        self._config = config or OptimizationConfig()
        self._logger = logger or get_app_logger()

    def execute(
        self,
        expression: str,
        metric: str,
        dimension: str,
        model: str,
        year: str | None = None,
    ) -> AccountCodeOptimization:
        """Optimize every group of ``expression`` against ``metric``.

        Args:
            expression: Account codes, e.g. ``400+401,36``.
            metric: Name of the reference metric (e.g. population), or
                ``custom:<formula>`` combining several metrics, e.g.
                ``custom:pop+0.5*workplaces``.
            dimension: Dimension of definitions and records.
            model: Accounting model of the code definitions.
            year: Restrict targets and metric to one year when set.

        Returns:
            AccountCodeOptimization: Best result and per-group details. An
            invalid formula yields an ``invalid_expression`` result.
        """
        formula_text = custom_scaling_formula(metric)
        if formula_text is None:
            scaling_values = self._scaling_repository.fetch_scaling_values(
                metric,
                year=year,
            )
        else:
            try:
                scaling_values = self._formula_values(formula_text, year)
            except ValidationError as exc:
                self._logger.warning(f"Invalid scaling formula: {exc}")
                return AccountCodeOptimization(
                    best=OptimizationResult(
                        coefficient=None,
                        r_squared=None,
                        is_acceptable=False,
                        iterations=0,
                        status=OptimizationStatus.INVALID_EXPRESSION,
                        error_message=str(exc),
                    )
                )
        if not scaling_values:
            self._logger.warning(
                f"No scaling values found for metric '{metric}'"
            )

        years = [year] if year else None
        aggregation = self._aggregated_data.execute(
            dimension,
            model,
            years=years,
        )
        optimization = optimize_account_codes(
            expression,
            aggregation.data,
            scaling_values,
            year=year,
            config=self._config,
            logger=self._logger,
        )
        best = optimization.best
        self._logger.info(
            f"Best scaling group for '{expression}': {best.group_name} "
            f"({best.status.value})"
        )
        return optimization

    def _formula_values(
        self,
        formula_text: str,
        year: str | None,
    ) -> dict[str, Decimal]:
        formula = parse_scaling_formula(
            formula_text,
            self._scaling_repository.list_metrics(),
        )
        metric_values = {
            name: self._scaling_repository.fetch_scaling_values(name, year=year)
            for name in formula.metrics
        }
        return evaluate_scaling_formula(
            formula,
            metric_values,
            logger=self._logger,
        )


__all__ = ["OptimizeScalingUseCase"]
