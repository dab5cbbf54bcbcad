"""Selection state machine for building comparisons interactively."""

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from finexplorer.domain.constants import COLUMN_ROW_CODE
from finexplorer.domain.models.comparison import (
    ActiveComparison,
    ColumnComparison,
    ComparisonKey,
    ComparisonPoint,
    ComparisonType,
    SelectionMode,
)
from finexplorer.domain.services.comparison import (
    create_comparison,
    format_comparisons,
    parse_comparisons,
)


class SelectionEvent(str, Enum):
    """Events driving the selection machine."""

    SELECT = "select"
    HOVER = "hover"
    LEAVE = "leave"
    CANCEL = "cancel"
    CLEAR = "clear"


def transition(
    mode: SelectionMode,
    event: SelectionEvent,
    *,
    same_cell: bool = False,
) -> SelectionMode:
    """Return the next selection mode.

    Args:
        mode: Current mode.
        event: Incoming event.
        same_cell: True when the event targets the pending base selection.

    Returns:
        SelectionMode: Mode after the event.
    """
    if event in (SelectionEvent.CANCEL, SelectionEvent.CLEAR):
        return SelectionMode.IDLE
    if mode is SelectionMode.IDLE:
        if event is SelectionEvent.SELECT:
            return SelectionMode.BASE_SELECTED
        return SelectionMode.IDLE
    if event is SelectionEvent.SELECT:
        return SelectionMode.IDLE
    if event is SelectionEvent.HOVER and not same_cell:
        return SelectionMode.TARGET_SELECTING
    return SelectionMode.BASE_SELECTED


class ComparisonSession:
    """Ordered collection of comparisons built from user selections.

    The first selection becomes the base, the second one creates the
    comparison, or removes it when the same pair already exists. Selecting
    the base again cancels it.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        """Initialize an empty session.

        Args:
            clock: Optional callable returning creation timestamps.
        """
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._mode = SelectionMode.IDLE
        self._base: ComparisonPoint | None = None
        self._hovered: tuple[str, str] | None = None
        self._comparisons: list[ActiveComparison] = []
        self._column_comparisons: list[ColumnComparison] = []

    @property
    def mode(self) -> SelectionMode:
        return self._mode

    @property
    def base_selection(self) -> ComparisonPoint | None:
        return self._base

    @property
    def hovered_cell(self) -> tuple[str, str] | None:
        return self._hovered

    @property
    def comparisons(self) -> tuple[ActiveComparison, ...]:
        return tuple(self._comparisons)

    @property
    def column_comparisons(self) -> tuple[ColumnComparison, ...]:
        return tuple(self._column_comparisons)

    @property
    def has_active_comparisons(self) -> bool:
        return bool(self._comparisons or self._column_comparisons)

    def select_cell(
        self,
        row_code: str,
        entity_code: str,
        value: Decimal,
        display_name: str = "",
    ) -> ActiveComparison | None:
        """Handle a click on a cell.

        Returns:
            ActiveComparison | None: The comparison created by this
            selection, or None when a base was set, cancelled, or an
            existing pair was toggled off.
        """
        point = ComparisonPoint(
            row_code=row_code,
            entity_code=entity_code,
            value=value,
            display_name=display_name,
            type=ComparisonType.CELL_TO_CELL,
        )
        if self._base is not None and self._base.type is not point.type:
            self._reset_selection()
        if self._base is None:
            self._base = point
            self._mode = transition(self._mode, SelectionEvent.SELECT)
            return None

        base = self._base
        same_cell = base.cell == point.cell
        self._mode = transition(
            self._mode,
            SelectionEvent.SELECT,
            same_cell=same_cell,
        )
        self._base = None
        if same_cell:
            return None
        return self.toggle_comparison(base, point)

    def select_column(
        self,
        entity_code: str,
        display_name: str = "",
    ) -> ColumnComparison | None:
        """Handle a click on a column header.

        Each target column is compared with at most one base column; a new
        comparison for the same target replaces the previous one.
        """
        point = ComparisonPoint(
            row_code=COLUMN_ROW_CODE,
            entity_code=entity_code,
            value=Decimal("0"),
            display_name=display_name,
            type=ComparisonType.COLUMN_TO_COLUMN,
        )
        if self._base is not None and self._base.type is not point.type:
            self._reset_selection()
        if self._base is None:
            self._base = point
            self._mode = transition(self._mode, SelectionEvent.SELECT)
            return None

        base = self._base
        same_column = base.entity_code == entity_code
        self._mode = transition(
            self._mode,
            SelectionEvent.SELECT,
            same_cell=same_column,
        )
        self._base = None
        if same_column:
            return None
        return self._add_column_comparison(
            base.entity_code,
            entity_code,
            base.display_name,
            display_name,
        )

    def hover(self, row_code: str, entity_code: str) -> None:
        """Track the hovered cell while a base is pending."""
        self._hovered = (row_code, entity_code)
        same_cell = self._base is not None and self._base.cell == (
            row_code,
            entity_code,
        )
        self._mode = transition(
            self._mode,
            SelectionEvent.HOVER,
            same_cell=same_cell,
        )

    def leave(self) -> None:
        self._hovered = None
        self._mode = transition(self._mode, SelectionEvent.LEAVE)

    def cancel(self) -> None:
        """Drop the pending base selection."""
        self._reset_selection()

    def clear_all(self) -> None:
        """Remove every comparison and the pending selection."""
        self._comparisons.clear()
        self._column_comparisons.clear()
        self._mode = transition(self._mode, SelectionEvent.CLEAR)
        self._base = None

    def toggle_comparison(
        self,
        base: ComparisonPoint,
        target: ComparisonPoint,
    ) -> ActiveComparison | None:
        """Create the comparison, or remove it if the pair already exists."""
        existing = self.comparison_for_pair(base, target)
        if existing is not None:
            self._comparisons.remove(existing)
            return None
        comparison = create_comparison(base, target, created_at=self._clock())
        self._comparisons.append(comparison)
        return comparison

    def remove_comparison(self, comparison_id: str) -> bool:
        """Remove a cell comparison by id; other comparisons are kept."""
        for index, comparison in enumerate(self._comparisons):
            if comparison.id == comparison_id:
                del self._comparisons[index]
                return True
        return False

    def remove_column_comparison(self, comparison_id: str) -> bool:
        for index, comparison in enumerate(self._column_comparisons):
            if comparison.id == comparison_id:
                del self._column_comparisons[index]
                return True
        return False

    def comparison_for_cell(
        self,
        row_code: str,
        entity_code: str,
    ) -> ActiveComparison | None:
        """Return the first comparison using the cell as base or target."""
        cell = (row_code, entity_code)
        for comparison in self._comparisons:
            if cell in (comparison.base.cell, comparison.target.cell):
                return comparison
        return None

    def column_comparison_for_entity(
        self,
        entity_code: str,
    ) -> ColumnComparison | None:
        for comparison in self._column_comparisons:
            if comparison.target_entity_code == entity_code:
                return comparison
        return None

    def to_keys(self) -> list[ComparisonKey]:
        """Return serializable keys for the session's comparisons.

        Cell comparisons spanning two different rows cannot be expressed in
        the compact form and are left out.
        """
        keys = [
            ComparisonKey(
                row_code=comparison.base.row_code,
                base_entity_code=comparison.base.entity_code,
                target_entity_code=comparison.target.entity_code,
            )
            for comparison in self._comparisons
            if comparison.base.row_code == comparison.target.row_code
        ]
        keys.extend(
            ComparisonKey(
                row_code=COLUMN_ROW_CODE,
                base_entity_code=comparison.base_entity_code,
                target_entity_code=comparison.target_entity_code,
            )
            for comparison in self._column_comparisons
        )
        return keys

    def to_query(self) -> str:
        return format_comparisons(self.to_keys())

    def restore(
        self,
        keys: Iterable[ComparisonKey],
        values: Mapping[tuple[str, str], Decimal],
        display_names: Mapping[str, str] | None = None,
    ) -> int:
        """Recreate comparisons from serialized keys.

        Args:
            keys: Parsed comparison keys.
            values: Cell values keyed by ``(row_code, entity_code)``.
            display_names: Optional entity display names.

        Returns:
            int: Number of comparisons added. Keys whose cells have no
            value and comparisons already active are skipped.
        """
        names = display_names or {}
        restored = 0
        for key in keys:
            if key.row_code == COLUMN_ROW_CODE:
                existing = self.column_comparison_for_entity(
                    key.target_entity_code
                )
                if (
                    existing is not None
                    and existing.base_entity_code == key.base_entity_code
                ):
                    continue
                self._add_column_comparison(
                    key.base_entity_code,
                    key.target_entity_code,
                    names.get(key.base_entity_code, key.base_entity_code),
                    names.get(key.target_entity_code, key.target_entity_code),
                )
                restored += 1
                continue
            base_value = values.get((key.row_code, key.base_entity_code))
            target_value = values.get((key.row_code, key.target_entity_code))
            if base_value is None or target_value is None:
                continue
            base = ComparisonPoint(
                row_code=key.row_code,
                entity_code=key.base_entity_code,
                value=base_value,
                display_name=names.get(key.base_entity_code, ""),
            )
            target = ComparisonPoint(
                row_code=key.row_code,
                entity_code=key.target_entity_code,
                value=target_value,
                display_name=names.get(key.target_entity_code, ""),
            )
            if self.comparison_for_pair(base, target) is None:
                self.toggle_comparison(base, target)
                restored += 1
        return restored

    def restore_from_query(
        self,
        text: str | None,
        values: Mapping[tuple[str, str], Decimal],
        display_names: Mapping[str, str] | None = None,
    ) -> int:
        return self.restore(parse_comparisons(text), values, display_names)

    def comparison_for_pair(
        self,
        base: ComparisonPoint,
        target: ComparisonPoint,
    ) -> ActiveComparison | None:
        key = (base.row_code, base.entity_code, target.row_code, target.entity_code)
        for comparison in self._comparisons:
            if comparison.key == key:
                return comparison
        return None

    def _add_column_comparison(
        self,
        base_entity_code: str,
        target_entity_code: str,
        base_display_name: str,
        target_display_name: str,
    ) -> ColumnComparison:
        self._column_comparisons = [
            comparison
            for comparison in self._column_comparisons
            if comparison.target_entity_code != target_entity_code
        ]
        comparison = ColumnComparison(
            id=f"column:{base_entity_code}>{target_entity_code}",
            base_entity_code=base_entity_code,
            target_entity_code=target_entity_code,
            base_display_name=base_display_name,
            target_display_name=target_display_name,
            created_at=self._clock(),
        )
        self._column_comparisons.append(comparison)
        return comparison

    def _reset_selection(self) -> None:
        self._mode = transition(self._mode, SelectionEvent.CANCEL)
        self._base = None


__all__ = ["SelectionEvent", "transition", "ComparisonSession"]
