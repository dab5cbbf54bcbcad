"""Domain models package."""

from .balance import (
    BalanceComparison,
    BalanceReport,
    BalanceTotals,
    CategoryAmount,
    EntityBalance,
    EntityType,
)
from .code_tree import CodeEntry, CodeNode, CodeTree
from .comparison import (
    ActiveComparison,
    ColumnComparison,
    ComparisonBase,
    ComparisonCalculation,
    ComparisonKey,
    ComparisonPoint,
    ComparisonTarget,
    ComparisonType,
    RowComparison,
    SelectionMode,
)
from .optimization import (
    AccountCodeGroup,
    AccountCodeOptimization,
    GroupSummary,
    OptimizationConfig,
    OptimizationResult,
    OptimizationStatus,
    ScalingEntity,
    ScalingFormula,
)
from .records import (
    AggregatedDatum,
    AggregationResult,
    FlatRecord,
    UnmatchedCode,
)

__all__ = [
    "CodeEntry",
    "CodeNode",
    "CodeTree",
    "FlatRecord",
    "AggregatedDatum",
    "AggregationResult",
    "UnmatchedCode",
    "ComparisonType",
    "SelectionMode",
    "ComparisonPoint",
    "ComparisonBase",
    "ComparisonTarget",
    "ComparisonCalculation",
    "ActiveComparison",
    "ColumnComparison",
    "RowComparison",
    "ComparisonKey",
    "AccountCodeGroup",
    "ScalingEntity",
    "OptimizationConfig",
    "OptimizationStatus",
    "OptimizationResult",
    "GroupSummary",
    "AccountCodeOptimization",
    "EntityType",
    "CategoryAmount",
    "EntityBalance",
    "BalanceTotals",
    "BalanceReport",
    "BalanceComparison",
    "ScalingFormula",
]
