"""Domain models for flat and aggregated financial records."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class FlatRecord:
    """One row of source financial data for an entity and year."""

    entity_id: str
    year: str
    code: str
    value: Decimal
    dimension: str = ""


@dataclass(frozen=True)
class AggregatedDatum:
    """Aggregated value of a tree node for one entity and year.

    Attributes:
        entity_id: Entity the value belongs to.
        year: Accounting year.
        code: Account code of the node.
        label: Node label in the requested language.
        value: Own record value plus the values of all descendants.
        dimension: Dimension of the source records.
        level: Code length of the node (0 for the root).
        has_direct_value: True when a record matched the node's code.
    """

    entity_id: str
    year: str
    code: str
    label: str
    value: Decimal
    dimension: str = ""
    level: int = 0
    has_direct_value: bool = False


@dataclass(frozen=True)
class UnmatchedCode:
    """Record code that did not match any node of the tree."""

    entity_id: str
    year: str
    code: str
    value: Decimal


@dataclass(frozen=True)
class AggregationResult:
    """Aggregated data together with warnings and processing counts."""

    data: tuple[AggregatedDatum, ...]
    unmatched: tuple[UnmatchedCode, ...] = ()
    total_records: int = 0
    group_count: int = 0

    @property
    def has_warnings(self) -> bool:
        return bool(self.unmatched)


__all__ = [
    "FlatRecord",
    "AggregatedDatum",
    "UnmatchedCode",
    "AggregationResult",
]
