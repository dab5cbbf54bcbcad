"""Domain models for cell and column comparisons."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ComparisonType(str, Enum):
    """Kind of selection a comparison was created from."""

    CELL_TO_CELL = "cell-to-cell"
    COLUMN_TO_COLUMN = "column-to-column"


class SelectionMode(str, Enum):
    """States of the comparison selection machine."""

    IDLE = "idle"
    BASE_SELECTED = "base-selected"
    TARGET_SELECTING = "target-selecting"


@dataclass(frozen=True)
class ComparisonPoint:
    """A selected cell or column, used as comparison base or target."""

    row_code: str
    entity_code: str
    value: Decimal
    display_name: str = ""
    type: ComparisonType = ComparisonType.CELL_TO_CELL

    @property
    def cell(self) -> tuple[str, str]:
        return (self.row_code, self.entity_code)


ComparisonBase = ComparisonPoint
ComparisonTarget = ComparisonPoint


@dataclass(frozen=True)
class ComparisonCalculation:
    """Outcome of comparing a base value with a target value.

    Attributes:
        percentage_change: Relative change in percent, None when undefined.
        absolute_change: Target minus base.
        is_valid: False when the percentage change cannot be computed.
        error_message: Reason for an invalid comparison.
    """

    percentage_change: Decimal | None
    absolute_change: Decimal
    is_valid: bool
    error_message: str | None = None


@dataclass(frozen=True)
class ActiveComparison:
    """Comparison between two selected cells."""

    id: str
    base: ComparisonPoint
    target: ComparisonPoint
    percentage_change: Decimal | None
    absolute_change: Decimal
    is_valid: bool
    created_at: datetime
    error_message: str | None = None

    @property
    def key(self) -> tuple[str, str, str, str]:
        """Return the identity of the comparison pair."""
        return (
            self.base.row_code,
            self.base.entity_code,
            self.target.row_code,
            self.target.entity_code,
        )


@dataclass(frozen=True)
class ColumnComparison:
    """Comparison between two entity columns across all rows."""

    id: str
    base_entity_code: str
    target_entity_code: str
    base_display_name: str
    target_display_name: str
    created_at: datetime


@dataclass(frozen=True)
class RowComparison:
    """Comparison of one row between a base and a target column."""

    row_code: str
    row_display_name: str
    base_value: Decimal
    target_value: Decimal
    percentage_change: Decimal | None
    absolute_change: Decimal
    is_valid: bool
    error_message: str | None = None


@dataclass(frozen=True)
class ComparisonKey:
    """Serialized form of one comparison pair."""

    row_code: str
    base_entity_code: str
    target_entity_code: str


__all__ = [
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
]
