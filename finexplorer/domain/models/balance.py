"""Domain models for income and expense balances."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class EntityType(str, Enum):
    """Level of government an entity belongs to."""

    MUNICIPALITY = "gdn"
    STATE = "std"


@dataclass(frozen=True)
class CategoryAmount:
    """Summed amount of one account code within a balance."""

    code: str
    description: str
    amount: Decimal


@dataclass(frozen=True)
class EntityBalance:
    """Income and expenses of one entity in one year.

    Attributes:
        entity_id: Entity the balance belongs to.
        entity_type: Municipality or canton/federation.
        year: Accounting year of the records.
        total_income: Sum of the records of the income dimensions.
        total_expenses: Sum of the records of the expense dimensions.
        income_breakdown: Income per account code, largest first.
        expense_breakdown: Expenses per account code, largest first.
    """

    entity_id: str
    entity_type: EntityType
    year: str
    total_income: Decimal
    total_expenses: Decimal
    income_breakdown: tuple[CategoryAmount, ...] = ()
    expense_breakdown: tuple[CategoryAmount, ...] = ()

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expenses


@dataclass(frozen=True)
class BalanceTotals:
    """Summed balances of all entities of one type."""

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    entity_count: int = 0

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expenses


@dataclass(frozen=True)
class BalanceReport:
    """Balances of every entity for one year with per-type totals."""

    year: str
    balances: tuple[EntityBalance, ...]
    totals: dict[EntityType, BalanceTotals] = field(default_factory=dict)

    def balance_for(self, entity_id: str) -> EntityBalance | None:
        for balance in self.balances:
            if balance.entity_id == entity_id:
                return balance
        return None


@dataclass(frozen=True)
class BalanceComparison:
    """Differences between the balances of two entities.

    Ratios divide the first entity's amount by the second's and are None
    when the second amount is zero.
    """

    first: EntityBalance
    second: EntityBalance
    income_difference: Decimal
    expense_difference: Decimal
    balance_difference: Decimal
    income_ratio: Decimal | None
    expense_ratio: Decimal | None


__all__ = [
    "EntityType",
    "CategoryAmount",
    "EntityBalance",
    "BalanceTotals",
    "BalanceReport",
    "BalanceComparison",
]
