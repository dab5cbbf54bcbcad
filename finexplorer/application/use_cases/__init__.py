"""Application use cases package."""

from .calculate_balances import CalculateBalancesUseCase
from .compare_entities import CompareEntitiesUseCase
from .get_aggregated_data import GetAggregatedDataUseCase
from .optimize_scaling import OptimizeScalingUseCase

__all__ = [
    "CalculateBalancesUseCase",
    "CompareEntitiesUseCase",
    "GetAggregatedDataUseCase",
    "OptimizeScalingUseCase",
]
