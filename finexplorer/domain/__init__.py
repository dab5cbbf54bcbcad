"""Domain package: code trees, aggregation, comparisons and scaling."""

from .errors import DataMismatchError, FinExplorerError, ValidationError
from .models import (
    AggregatedDatum,
    AggregationResult,
    CodeEntry,
    CodeNode,
    CodeTree,
    FlatRecord,
    OptimizationConfig,
    OptimizationResult,
    ScalingEntity,
)
from .services import (
    ComparisonSession,
    aggregate,
    build_tree,
    calculate_comparison,
    create_comparison,
    optimize,
    optimize_account_codes,
    parse_account_codes,
)

__all__ = [
    "FinExplorerError",
    "ValidationError",
    "DataMismatchError",
    "CodeEntry",
    "CodeNode",
    "CodeTree",
    "FlatRecord",
    "AggregatedDatum",
    "AggregationResult",
    "ScalingEntity",
    "OptimizationConfig",
    "OptimizationResult",
    "build_tree",
    "aggregate",
    "calculate_comparison",
    "create_comparison",
    "ComparisonSession",
    "parse_account_codes",
    "optimize",
    "optimize_account_codes",
]
