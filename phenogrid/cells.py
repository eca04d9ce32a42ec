"""Cell and grid model for the export layout engine.

Provides:
- ``StyleTag``: abstract presentation tags attached to cells
- ``Cell``: one addressed grid unit
- ``Grid``: a sparse, position-addressed collection of cells
- ``RowCursor``: column bookkeeping for one body row
- ``RunTracker``: run-length state for grouping columns

Rules:
- A grid holds at most one cell per (column, row); a second insert at the
  same position replaces the first (last write wins).
- Grids are not rectangular; missing positions render as blank.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Hashable, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class StyleTag(str, Enum):
    HEADER = "header"
    LARGE_HEADER = "large-header"
    YES = "yes"
    NO = "no"
    YES_NO_SEPARATOR = "yes-no-separator"
    FEATURE_SEPARATOR = "feature-separator"


@dataclass
class Cell:
    column: int
    row: int
    value: str = ""
    styles: set[StyleTag] = field(default_factory=set)
    multiline: bool = False

    def __post_init__(self) -> None:
        if self.column < 0 or self.row < 0:
            raise ValueError(f"Cell position must be non-negative: ({self.column}, {self.row})")
        if self.value is None:
            self.value = ""
        elif not isinstance(self.value, str):
            self.value = str(self.value)

    @property
    def position(self) -> Tuple[int, int]:
        return (self.column, self.row)


@dataclass(frozen=True)
class CellValue:
    """A display value plus the styles a translator wants attached to it."""

    text: str
    styles: FrozenSet[StyleTag] = frozenset()


class Grid:
    """Sparse collection of cells keyed by (column, row)."""

    def __init__(self, cells: Optional[Iterable[Cell]] = None) -> None:
        self._cells: Dict[Tuple[int, int], Cell] = {}
        for cell in cells or []:
            self.add(cell)

    def add(self, cell: Cell) -> Cell:
        """Insert ``cell``; an existing cell at the same position is replaced."""
        if cell.position in self._cells:
            logger.debug("replacing cell at %s", cell.position)
        self._cells[cell.position] = cell
        return cell

    def get(self, column: int, row: int) -> Optional[Cell]:
        return self._cells.get((column, row))

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        """Iterate cells in row-major order."""
        for key in sorted(self._cells, key=lambda pos: (pos[1], pos[0])):
            yield self._cells[key]

    @property
    def max_column(self) -> int:
        """Highest used column index, or -1 when the grid is empty."""
        return max((c for c, _ in self._cells), default=-1)

    @property
    def max_row(self) -> int:
        """Highest used row index, or -1 when the grid is empty."""
        return max((r for _, r in self._cells), default=-1)

    @property
    def column_count(self) -> int:
        return self.max_column + 1

    @property
    def row_count(self) -> int:
        return self.max_row + 1

    def row(self, index: int) -> List[Cell]:
        return [cell for cell in self if cell.row == index]

    def column(self, index: int) -> List[Cell]:
        return [cell for cell in self if cell.column == index]

    def paste(self, other: "Grid", column_offset: int = 0, row_offset: int = 0) -> None:
        """Copy every cell of ``other`` into this grid, shifted by the offsets."""
        for cell in other:
            self.add(
                Cell(
                    cell.column + column_offset,
                    cell.row + row_offset,
                    cell.value,
                    set(cell.styles),
                    cell.multiline,
                )
            )

    def to_matrix(self) -> List[List[str]]:
        """Render as a dense row list; unpopulated positions become ''."""
        matrix = [["" for _ in range(self.column_count)] for _ in range(self.row_count)]
        for cell in self._cells.values():
            matrix[cell.row][cell.column] = cell.value
        return matrix


class RowCursor:
    """Walks the columns of one body row.

    ``place`` emits a cell and advances, ``reserve`` advances without a cell
    (the column stays part of the row but the run it belongs to already has
    its label).
    """

    def __init__(self, grid: Grid, row: int, column: int = 0) -> None:
        self.grid = grid
        self.row = row
        self.column = column
        self.height = 1

    def place(
        self,
        value: Any,
        styles: Iterable[StyleTag] = (),
        multiline: bool = False,
    ) -> Cell:
        cell = self.grid.add(Cell(self.column, self.row, _as_text(value), set(styles), multiline))
        self.column += 1
        return cell

    def place_stack(
        self,
        values: List[Any],
        styles: Iterable[StyleTag] = (),
        multiline: bool = False,
    ) -> List[Cell]:
        """Emit one cell per value, stacked downward; an empty list yields one blank cell."""
        if not values:
            values = [""]
        cells = []
        for offset, value in enumerate(values):
            cells.append(
                self.grid.add(
                    Cell(self.column, self.row + offset, _as_text(value), set(styles), multiline)
                )
            )
        self.height = max(self.height, len(cells))
        self.column += 1
        return cells

    def place_cells(self, cells: List[Cell]) -> List[Cell]:
        """Add prebuilt cells (e.g. from the overflow wrapper) at this column."""
        for cell in cells:
            self.grid.add(cell)
        if cells:
            self.height = max(self.height, max(c.row for c in cells) - self.row + 1)
        self.column += 1
        return cells

    def reserve(self) -> None:
        self.column += 1


_UNSET = object()


class RunTracker:
    """Run-length state for the grouping columns of one body build.

    A value starts a new run when it differs from the previous row's value
    for the same column, or when an earlier grouping column started a run on
    the current row. Must not be shared between records.
    """

    def __init__(self, columns: Iterable[Hashable]) -> None:
        self._last: Dict[Hashable, Any] = {column: _UNSET for column in columns}
        self._row_started = False

    def begin_row(self) -> None:
        self._row_started = False

    def starts_run(self, column: Hashable, value: Any) -> bool:
        if self._row_started or self._last.get(column, _UNSET) is _UNSET or \
           self._last[column] != value:
            self._last[column] = value
            self._row_started = True
            return True
        return False


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
