"""Fit scaling coefficients that normalize entities against a metric.

For every entity the optimizer looks for a single coefficient ``c`` such
that ``target ≈ c * scaling``. The fit starts from least squares through
the origin and is refined until the scaled ratios ``target / (c * scaling)``
are centred on 1. Acceptance requires a minimum R² and a coefficient of
variation of the ratios below a threshold.
"""

import math
from collections.abc import Iterable, Mapping
from logging import Logger

from finexplorer.domain.errors import ValidationError
from finexplorer.domain.models.optimization import (
    AccountCodeGroup,
    AccountCodeOptimization,
    GroupSummary,
    OptimizationConfig,
    OptimizationResult,
    OptimizationStatus,
    ScalingEntity,
)
from finexplorer.domain.models.records import AggregatedDatum
from finexplorer.domain.services.account_codes import parse_account_codes
from finexplorer.domain.services.aggregation import values_for_codes
from finexplorer.domain.services.dispersion import (
    coefficient_of_variation,
    mean,
    r_squared,
)


def optimize(
    entities: Iterable[ScalingEntity],
    config: OptimizationConfig | None = None,
    *,
    group_name: str | None = None,
) -> OptimizationResult:
    """Fit one scaling coefficient across entities.

    Args:
        entities: Target and scaling values per entity.
        config: Thresholds and limits, defaults to ``OptimizationConfig()``.
        group_name: Account-code group the targets were built from.

    Returns:
        OptimizationResult: Fitted coefficient and fit quality, or a
        failure status when there is not enough usable data.

    Raises:
        ValueError: If ``config.max_iterations`` is negative.
    """
    config = config or OptimizationConfig()
    if config.max_iterations < 0:
        raise ValueError(
            f"max_iterations must be >= 0, got {config.max_iterations}"
        )

    points = _usable_points(entities)
    count = len(points)
    if count == 0 or count < config.min_entity_count:
        return OptimizationResult(
            coefficient=None,
            r_squared=None,
            is_acceptable=False,
            iterations=0,
            status=OptimizationStatus.INSUFFICIENT_DATA,
            entity_count=count,
            group_name=group_name,
            error_message=(
                f"Insufficient data: {count} usable entities, at least "
                f"{max(config.min_entity_count, 1)} required"
            ),
        )

    targets = [target for target, _ in points]
    scalings = [scaling for _, scaling in points]
    coefficient = math.fsum(
        target * scaling for target, scaling in points
    ) / math.fsum(scaling * scaling for scaling in scalings)

    if coefficient == 0 or not math.isfinite(coefficient):
        return OptimizationResult(
            coefficient=coefficient if math.isfinite(coefficient) else None,
            r_squared=r_squared(targets, [0.0] * count),
            is_acceptable=False,
            iterations=0,
            status=OptimizationStatus.THRESHOLD_NOT_MET,
            entity_count=count,
            group_name=group_name,
            error_message=(
                "Target values are not proportional to the scaling metric"
            ),
        )

    coefficient, iterations = _refine(coefficient, points, config)

    predicted = [coefficient * scaling for scaling in scalings]
    fit = r_squared(targets, predicted)
    ratios = _ratios(coefficient, points)
    dispersion = coefficient_of_variation(ratios)
    threshold = (
        config.single_entity_r_squared_threshold
        if count == 1
        else config.r_squared_threshold
    )

    problems = []
    if fit < threshold:
        problems.append(f"R² {fit:.4f} is below the threshold {threshold}")
    if not dispersion < config.cv_threshold:
        problems.append(
            f"coefficient of variation {dispersion:.4f} is not below "
            f"{config.cv_threshold}"
        )
    if abs(coefficient) > config.max_coefficient_value:
        problems.append(
            f"coefficient {coefficient:.6g} exceeds "
            f"{config.max_coefficient_value}"
        )

    return OptimizationResult(
        coefficient=coefficient,
        r_squared=fit,
        is_acceptable=not problems,
        iterations=iterations,
        status=(
            OptimizationStatus.THRESHOLD_NOT_MET
            if problems
            else OptimizationStatus.ACCEPTED
        ),
        coefficient_of_variation=dispersion,
        entity_count=count,
        group_name=group_name,
        error_message="; ".join(problems) or None,
    )


def optimize_account_codes(
    expression: str,
    data: Iterable[AggregatedDatum],
    scaling_values: Mapping[str, float],
    *,
    year: str | None = None,
    config: OptimizationConfig | None = None,
    logger: Logger | None = None,
) -> AccountCodeOptimization:
    """Optimize every account-code group of an expression and keep the best.

    Args:
        expression: Account codes, ``+`` to sum, ``,`` to separate groups.
        data: Aggregated data of the compared entities.
        scaling_values: Reference metric per entity id.
        year: Restrict the targets to one year when set.
        config: Thresholds and limits.
        logger: Optional logger for progress messages.

    Returns:
        AccountCodeOptimization: Best result, all group results and a
        dispersion summary per group. A malformed expression yields an
        ``invalid_expression`` result.
    """
    try:
        groups = parse_account_codes(expression)
    except ValidationError as exc:
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

    rows = tuple(data)
    results: list[OptimizationResult] = []
    summaries: list[GroupSummary] = []
    for group in groups:
        entities = _group_entities(group, rows, scaling_values, year)
        if not entities:
            results.append(
                OptimizationResult(
                    coefficient=None,
                    r_squared=None,
                    is_acceptable=False,
                    iterations=0,
                    status=OptimizationStatus.NO_DATA,
                    group_name=group.name,
                    error_message=(
                        f"No financial data with a scaling value found for "
                        f"account codes {group.name}"
                    ),
                )
            )
            continue
        result = optimize(entities, config, group_name=group.name)
        results.append(result)
        summaries.append(_summarize(group.name, entities, result))
        if logger is not None:
            logger.info(
                f"Scaling fit for {group.name}: status={result.status.value}, "
                f"entities={result.entity_count}, r_squared={result.r_squared}"
            )

    return AccountCodeOptimization(
        best=_select_best(results),
        results=tuple(results),
        summaries=tuple(summaries),
    )


def apply_scaling(
    entities: Iterable[ScalingEntity],
    coefficient: float,
) -> dict[str, float]:
    """Return each entity's target divided by ``coefficient * scaling``.

    Entities whose scaled denominator is zero keep their raw target.
    """
    scaled: dict[str, float] = {}
    for entity in entities:
        denominator = coefficient * float(entity.scaling_value)
        target = float(entity.target_value)
        scaled[entity.id] = target / denominator if denominator else target
    return scaled


def _usable_points(
    entities: Iterable[ScalingEntity],
) -> list[tuple[float, float]]:
    points = []
    for entity in entities:
        target = float(entity.target_value)
        scaling = float(entity.scaling_value)
        if not (math.isfinite(target) and math.isfinite(scaling)):
            continue
        if scaling == 0:
            continue
        points.append((target, scaling))
    return points


def _ratios(
    coefficient: float,
    points: list[tuple[float, float]],
) -> list[float]:
    return [target / (coefficient * scaling) for target, scaling in points]


def _refine(
    coefficient: float,
    points: list[tuple[float, float]],
    config: OptimizationConfig,
) -> tuple[float, int]:
    iterations = 0
    while iterations < config.max_iterations:
        ratios = _ratios(coefficient, points)
        ratio_sum = math.fsum(ratios)
        if ratio_sum == 0:
            break
        # Rescaling by m minimizes sum((ratio / m - 1) ** 2).
        correction = math.fsum(ratio * ratio for ratio in ratios) / ratio_sum
        # A non-positive factor would flip the sign of the coefficient.
        if not math.isfinite(correction) or correction <= 0:
            break
        if abs(correction - 1) <= config.convergence_tolerance:
            break
        coefficient *= correction
        iterations += 1
    return coefficient, iterations


def _group_entities(
    group: AccountCodeGroup,
    rows: tuple[AggregatedDatum, ...],
    scaling_values: Mapping[str, float],
    year: str | None,
) -> list[ScalingEntity]:
    # Scaling values carry one year per entity, so must the targets.
    totals = values_for_codes(rows, group.codes, year=year, latest_year=True)
    return [
        ScalingEntity(
            id=entity_id,
            target_value=float(total),
            scaling_value=float(scaling_values[entity_id]),
        )
        for entity_id, total in totals.items()
        if scaling_values.get(entity_id) is not None
    ]


def _summarize(
    group_name: str,
    entities: list[ScalingEntity],
    result: OptimizationResult,
) -> GroupSummary:
    targets = [float(entity.target_value) for entity in entities]
    before = coefficient_of_variation(targets)
    after = before
    if result.coefficient:
        after = coefficient_of_variation(
            list(apply_scaling(entities, result.coefficient).values())
        )
    improvement = 0.0
    if before > 0 and math.isfinite(before) and math.isfinite(after):
        improvement = (before - after) / before * 100
    return GroupSummary(
        group_name=group_name,
        entity_count=len(entities),
        mean_value=mean(targets),
        before_cv=before,
        after_cv=after,
        improvement=improvement,
    )


def _select_best(results: list[OptimizationResult]) -> OptimizationResult:
    fitted = [result for result in results if result.r_squared is not None]
    if not fitted:
        return results[0]
    # max() keeps the first of equal candidates, i.e. expression order.
    return max(
        fitted,
        key=lambda result: (result.is_acceptable, result.r_squared),
    )


__all__ = ["optimize", "optimize_account_codes", "apply_scaling"]
