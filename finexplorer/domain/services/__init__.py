"""Domain services package."""

from .account_codes import (
    format_account_codes,
    is_valid_account_code_expression,
    parse_account_codes,
)
from .aggregation import aggregate, index_by_code, values_for_codes
from .balance import (
    calculate_balances,
    compare_balances,
    entity_balance,
    entity_type_for,
)
from .code_tree import build_tree
from .comparison import (
    calculate_comparison,
    compare_columns,
    create_comparison,
    format_absolute_change,
    format_comparisons,
    format_percentage_change,
    parse_comparisons,
)
from .comparison_session import ComparisonSession, SelectionEvent, transition
from .dispersion import coefficient_of_variation, r_squared
from .scaling import apply_scaling, optimize, optimize_account_codes
from .scaling_formula import (
    custom_scaling_formula,
    evaluate_formula,
    evaluate_scaling_formula,
    is_valid_scaling_formula,
    parse_scaling_formula,
)

__all__ = [
    "build_tree",
    "aggregate",
    "index_by_code",
    "values_for_codes",
    "calculate_comparison",
    "create_comparison",
    "compare_columns",
    "format_percentage_change",
    "format_absolute_change",
    "parse_comparisons",
    "format_comparisons",
    "ComparisonSession",
    "SelectionEvent",
    "transition",
    "parse_account_codes",
    "format_account_codes",
    "is_valid_account_code_expression",
    "coefficient_of_variation",
    "r_squared",
    "optimize",
    "optimize_account_codes",
    "apply_scaling",
    "parse_scaling_formula",
    "is_valid_scaling_formula",
    "custom_scaling_formula",
    "evaluate_formula",
    "evaluate_scaling_formula",
    "entity_type_for",
    "calculate_balances",
    "entity_balance",
    "compare_balances",
]
