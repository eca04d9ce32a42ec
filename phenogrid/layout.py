"""Generic header and body builders for export sections.

Both builders work from a ``SectionDescriptor`` and the section's present
columns. They return ``None`` (absent section) when no column is visible;
otherwise header and body cover exactly the same columns.

Header layout:
- row 0, column 0: section title (HEADER + LARGE_HEADER)
- row 1: column labels, or spanning group labels when a group is visible
- row 2: column labels when any group label is written on row 1

Body layout:
- one or more rows per entry, starting at row 0
- a section without entries gets one row of blank cells
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from .cells import Cell, CellValue, Grid, RowCursor, RunTracker, StyleTag
from .overflow import CHARACTERS_PER_LINE, prevent_overflow
from .record import PatientRecord
from .sections import ColumnSpec, Entry, Present, SectionDescriptor

logger = logging.getLogger(__name__)


def build_header(descriptor: SectionDescriptor, present: Present) -> Optional[Grid]:
    columns = descriptor.visible_columns(present)
    if not columns:
        return None

    index_of = {spec.column: index for index, spec in enumerate(columns)}
    group_starts: List[tuple[str, int]] = []
    for group in descriptor.groups:
        member_indexes = [index_of[column] for column in group.members if column in index_of]
        if member_indexes:
            group_starts.append((group.label, min(member_indexes)))

    grid = Grid()
    label_row = 2 if group_starts else 1
    for index, spec in enumerate(columns):
        grid.add(Cell(index, label_row, spec.label, {StyleTag.HEADER}))
    for label, start in group_starts:
        grid.add(Cell(start, 1, label, {StyleTag.HEADER}))
    grid.add(Cell(0, 0, descriptor.title, {StyleTag.HEADER, StyleTag.LARGE_HEADER}))
    return grid


def build_body(
    descriptor: SectionDescriptor,
    present: Present,
    record: PatientRecord,
    width: int = CHARACTERS_PER_LINE,
) -> Optional[Grid]:
    columns = descriptor.visible_columns(present)
    if not columns:
        return None

    grid = Grid()
    entry_columns = [spec for spec in columns if not spec.section_scoped]
    entries = _safe_entries(descriptor, present, record)

    if not entries:
        cursor = RowCursor(grid, 0)
        for _ in entry_columns:
            cursor.place("")
    else:
        runs = RunTracker(spec.column for spec in entry_columns if spec.grouping)
        row = 0
        for entry in entries:
            runs.begin_row()
            cursor = RowCursor(grid, row)
            for spec in entry_columns:
                _place_entry_value(cursor, spec, entry.get(spec.column), runs, width)
            row += cursor.height

    if descriptor.section_values is not None:
        values = descriptor.section_values(record)
        for index, spec in enumerate(columns):
            if not spec.section_scoped:
                continue
            cursor = RowCursor(grid, 0, index)
            _place_value(cursor, spec, values.get(spec.column), width)

    return grid


def _safe_entries(
    descriptor: SectionDescriptor,
    present: Present,
    record: PatientRecord,
) -> List[Entry]:
    entries = descriptor.entries(record, present)
    if entries is None:
        logger.warning("record %s: no iterable data for section %s", record.id, descriptor.name)
        return []
    return list(entries)


def _place_entry_value(
    cursor: RowCursor,
    spec: ColumnSpec,
    raw: Any,
    runs: RunTracker,
    width: int,
) -> None:
    if spec.grouping and not runs.starts_run(spec.column, raw):
        cursor.reserve()
        return
    _place_value(cursor, spec, raw, width)


def _place_value(cursor: RowCursor, spec: ColumnSpec, raw: Any, width: int) -> None:
    if spec.expands:
        items = raw if isinstance(raw, (list, tuple)) else ([] if raw is None else [raw])
        translated = [_translate(spec, item) for item in items]
        cells = cursor.place_stack([text for text, _ in translated], spec.styles, spec.multiline)
        for cell, (_, styles) in zip(cells, translated):
            cell.styles.update(styles)
        return

    text, styles = _translate(spec, raw)
    if spec.wraps:
        cells = prevent_overflow(text, cursor.column, cursor.row, width)
        for cell in cells:
            cell.styles.update(spec.styles | styles)
        cursor.place_cells(cells)
        return

    cursor.place(text, spec.styles | styles, spec.multiline)


def _translate(spec: ColumnSpec, raw: Any) -> tuple[str, frozenset[StyleTag]]:
    value = spec.translate(raw) if spec.translate is not None else raw
    if isinstance(value, CellValue):
        return value.text, value.styles
    if value is None:
        return "", frozenset()
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if v is not None), frozenset()
    return (value if isinstance(value, str) else str(value)), frozenset()
