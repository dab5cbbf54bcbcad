"""Domain models for the scaling optimizer."""

from dataclasses import dataclass
from enum import Enum

from finexplorer.domain.constants import (
    COEFFICIENT_OF_VARIATION_THRESHOLD,
    CONVERGENCE_TOLERANCE,
    DEFAULT_R_SQUARED_THRESHOLD,
    MAX_COEFFICIENT_VALUE,
    MAX_OPTIMIZATION_ITERATIONS,
    MIN_ENTITY_COUNT_FOR_OPTIMIZATION,
    SINGLE_ENTITY_R_SQUARED_THRESHOLD,
)


@dataclass(frozen=True)
class AccountCodeGroup:
    """Account codes summed together before optimization."""

    codes: tuple[str, ...]

    @property
    def name(self) -> str:
        return "+".join(self.codes)


@dataclass(frozen=True)
class ScalingEntity:
    """Target and reference values of one entity."""

    id: str
    target_value: float
    scaling_value: float


@dataclass(frozen=True)
class OptimizationConfig:
    """Thresholds and limits for a scaling fit.

    Attributes:
        r_squared_threshold: Minimum R² for multi-entity fits.
        single_entity_r_squared_threshold: Minimum R² when only one entity
            takes part in the fit.
        cv_threshold: Upper bound (exclusive) on the coefficient of
            variation of the scaled ratios.
        max_iterations: Ceiling on refinement steps.
        min_entity_count: Minimum number of usable entities.
        max_coefficient_value: Largest accepted absolute coefficient.
        convergence_tolerance: Stop refining once the correction factor is
            this close to 1.
    """

    r_squared_threshold: float = DEFAULT_R_SQUARED_THRESHOLD
    single_entity_r_squared_threshold: float = (
        SINGLE_ENTITY_R_SQUARED_THRESHOLD
    )
    cv_threshold: float = COEFFICIENT_OF_VARIATION_THRESHOLD
    max_iterations: int = MAX_OPTIMIZATION_ITERATIONS
    min_entity_count: int = MIN_ENTITY_COUNT_FOR_OPTIMIZATION
    max_coefficient_value: float = MAX_COEFFICIENT_VALUE
    convergence_tolerance: float = CONVERGENCE_TOLERANCE


class OptimizationStatus(str, Enum):
    """Outcome category of an optimization run."""

    ACCEPTED = "accepted"
    THRESHOLD_NOT_MET = "threshold_not_met"
    INSUFFICIENT_DATA = "insufficient_data"
    INVALID_EXPRESSION = "invalid_expression"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class OptimizationResult:
    """Result of fitting a scaling coefficient."""

    coefficient: float | None
    r_squared: float | None
    is_acceptable: bool
    iterations: int
    status: OptimizationStatus
    coefficient_of_variation: float | None = None
    entity_count: int = 0
    group_name: str | None = None
    error_message: str | None = None

    @property
    def has_fit(self) -> bool:
        return self.coefficient is not None


@dataclass(frozen=True)
class GroupSummary:
    """Dispersion of an account-code group before and after scaling."""

    group_name: str
    entity_count: int
    mean_value: float
    before_cv: float
    after_cv: float
    improvement: float


@dataclass(frozen=True)
class AccountCodeOptimization:
    """Best fit across several account-code groups."""

    best: OptimizationResult
    results: tuple[OptimizationResult, ...] = ()
    summaries: tuple[GroupSummary, ...] = ()


@dataclass(frozen=True)
class ScalingFormula:
    """Compiled arithmetic combination of scaling metrics.

    Attributes:
        text: Formula without whitespace, e.g. ``1.5*pop+30*area``.
        metrics: Metric names in order of first use.
        postfix: Operands and operators in evaluation order, as
            ``(kind, token)`` pairs with kind ``number``, ``metric``,
            ``operator`` or ``negate``.
    """

    text: str
    metrics: tuple[str, ...]
    postfix: tuple[tuple[str, str], ...]


__all__ = [
    "AccountCodeGroup",
    "ScalingEntity",
    "OptimizationConfig",
    "OptimizationStatus",
    "OptimizationResult",
    "GroupSummary",
    "AccountCodeOptimization",
    "ScalingFormula",
]
