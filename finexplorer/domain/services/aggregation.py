"""Aggregate flat financial records onto an account-code tree."""

from collections.abc import Iterable
from decimal import Decimal
from logging import Logger

from finexplorer.domain.constants import DEFAULT_LANGUAGE
from finexplorer.domain.errors import DataMismatchError
from finexplorer.domain.models.code_tree import CodeNode, CodeTree
from finexplorer.domain.models.records import (
    AggregatedDatum,
    AggregationResult,
    FlatRecord,
    UnmatchedCode,
)
from finexplorer.utils.decimal_utils import coerce_decimal


def aggregate(
    tree: CodeTree,
    records: Iterable[FlatRecord],
    *,
    dimension: str | None = None,
    language: str = DEFAULT_LANGUAGE,
    strict: bool = False,
    logger: Logger | None = None,
) -> AggregationResult:
    """Aggregate records bottom-up for every entity and year.

    A node's value is the value of the records matching its own code plus
    the values of all its children. One datum is emitted per node and per
    ``(entity_id, year)`` group, in pre-order, zero values included.

    Args:
        tree: Code tree produced by ``build_tree``.
        records: Flat records for any number of entities and years.
        dimension: When set, records of other dimensions are ignored.
        language: Language used for datum labels.
        strict: Raise instead of skipping records with unknown codes.
        logger: Optional logger used for unmatched-code warnings.

    Returns:
        AggregationResult: Aggregated data, unmatched codes and counts.

    Raises:
        TypeError: If ``tree`` is None.
        DataMismatchError: In strict mode, for the first unknown code.
    """
    if tree is None:
        raise TypeError("aggregate() requires a code tree")

    owners = _code_owners(tree)
    lookups: dict[tuple[str, str], dict[str, Decimal]] = {}
    dimensions: dict[tuple[str, str], str] = {}
    unmatched: list[UnmatchedCode] = []
    total_records = 0

    for record in records:
        if dimension is not None and record.dimension != dimension:
            continue
        total_records += 1
        key = (record.entity_id, record.year)
        lookup = lookups.setdefault(key, {})
        dimensions.setdefault(key, record.dimension)
        code = record.code.strip()
        value = coerce_decimal(record.value)
        if code not in owners:
            if strict:
                raise DataMismatchError(code, record.entity_id, record.year)
            unmatched.append(
                UnmatchedCode(
                    entity_id=record.entity_id,
                    year=record.year,
                    code=code,
                    value=value,
                )
            )
            continue
        lookup[code] = lookup.get(code, Decimal("0")) + value

    if unmatched and logger is not None:
        codes = sorted({item.code for item in unmatched})
        logger.warning(
            f"Dropped {len(unmatched)} records with codes missing from "
            f"the tree: {', '.join(codes)}"
        )

    data: list[AggregatedDatum] = []
    for (entity_id, year), lookup in lookups.items():
        rows: list[tuple[CodeNode, Decimal, bool]] = []
        _aggregate_node(tree.root, lookup, owners, rows)
        group_dimension = (
            dimension if dimension is not None else dimensions[(entity_id, year)]
        )
        data.extend(
            AggregatedDatum(
                entity_id=entity_id,
                year=year,
                code=node.code,
                label=node.label(language),
                value=value,
                dimension=group_dimension,
                level=node.level,
                has_direct_value=has_direct_value,
            )
            for node, value, has_direct_value in rows
        )

    return AggregationResult(
        data=tuple(data),
        unmatched=tuple(unmatched),
        total_records=total_records,
        group_count=len(lookups),
    )


def _code_owners(tree: CodeTree) -> dict[str, CodeNode]:
    owners: dict[str, CodeNode] = {}
    for node in tree.iter_nodes():
        if node is tree.root:
            continue
        owners.setdefault(node.code, node)
    return owners


def _aggregate_node(
    node: CodeNode,
    lookup: dict[str, Decimal],
    owners: dict[str, CodeNode],
    rows: list[tuple[CodeNode, Decimal, bool]],
) -> Decimal:
    position = len(rows)
    rows.append((node, Decimal("0"), False))
    has_direct_value = owners.get(node.code) is node and node.code in lookup
    total = lookup[node.code] if has_direct_value else Decimal("0")
    for child in node.children:
        total += _aggregate_node(child, lookup, owners, rows)
    rows[position] = (node, total, has_direct_value)
    return total


def index_by_code(
    data: Iterable[AggregatedDatum],
) -> dict[tuple[str, str, str], AggregatedDatum]:
    """Index aggregated data by ``(entity_id, year, code)``.

    The first datum wins when a code appears on several sibling nodes.
    """
    index: dict[tuple[str, str, str], AggregatedDatum] = {}
    for datum in data:
        index.setdefault((datum.entity_id, datum.year, datum.code), datum)
    return index


def values_for_codes(
    data: Iterable[AggregatedDatum],
    codes: Iterable[str],
    *,
    year: str | None = None,
    latest_year: bool = False,
) -> dict[str, Decimal]:
    """Sum the aggregated values of several codes per entity.

    Args:
        data: Aggregated data of one or more entities.
        codes: Account codes to add up.
        year: Restrict to a single year when set.
        latest_year: Without ``year``, only sum each entity's most recent
            year having one of the codes instead of all years.

    Returns:
        dict[str, Decimal]: Sum per entity, for entities having at least
        one of the codes.
    """
    wanted = set(codes)
    rows = [
        datum
        for datum in data
        if datum.code in wanted and (year is None or datum.year == year)
    ]
    latest: dict[str, str] = {}
    if year is None and latest_year:
        for datum in rows:
            current = latest.get(datum.entity_id)
            if current is None or (
                year_sort_key(datum.year) > year_sort_key(current)
            ):
                latest[datum.entity_id] = datum.year

    totals: dict[str, Decimal] = {}
    for datum in rows:
        if latest and datum.year != latest[datum.entity_id]:
            continue
        totals[datum.entity_id] = (
            totals.get(datum.entity_id, Decimal("0")) + datum.value
        )
    return totals


def year_sort_key(year: str) -> tuple[int, str]:
    """Order years by value; non-numeric years sort first."""
    stripped = year.strip()
    return (int(stripped), "") if stripped.isdigit() else (0, stripped)


__all__ = ["aggregate", "index_by_code", "values_for_codes", "year_sort_key"]
