"""Descriptive statistics used by the scaling optimizer."""

import math
from collections.abc import Sequence


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def variance(values: Sequence[float]) -> float:
    """Return the population variance, 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    center = mean(values)
    return math.fsum((value - center) ** 2 for value in values) / len(values)


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Return the standard deviation relative to the absolute mean.

    Args:
        values: Sample values.

    Returns:
        float: Coefficient of variation; 0 for fewer than two values and
        ``math.inf`` when the mean is zero.
    """
    if len(values) < 2:
        return 0.0
    center = mean(values)
    if center == 0:
        return math.inf
    return math.sqrt(variance(values)) / abs(center)


def r_squared(observed: Sequence[float], predicted: Sequence[float]) -> float:
    """Return the coefficient of determination of a set of predictions.

    Args:
        observed: Observed values.
        predicted: Fitted values, aligned with ``observed``.

    Returns:
        float: ``1 - SS_res / SS_tot``; 1.0 when the observed values have
        no variance.
    """
    if len(observed) != len(predicted):
        raise ValueError("observed and predicted must have the same length")
    center = mean(observed)
    total = math.fsum((value - center) ** 2 for value in observed)
    if total == 0:
        return 1.0
    residual = math.fsum(
        (value - fitted) ** 2 for value, fitted in zip(observed, predicted)
    )
    return 1.0 - residual / total


__all__ = ["mean", "variance", "coefficient_of_variation", "r_squared"]
