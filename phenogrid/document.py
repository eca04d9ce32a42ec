"""Assembly of per-section grids into one exportable sheet.

Layout:
- section headers side by side in section order, absent sections skipped
- each record's section bodies below the headers, one record block after
  another; a block is as tall as the record's tallest section body
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .cells import Grid
from .record import PatientRecord
from .session import ExportSession


def assemble(session: ExportSession, records: Iterable[PatientRecord]) -> Grid:
    """Merge headers and every record's bodies into a single grid."""
    headers = session.headers()
    sheet = Grid()

    column = 0
    header_height = 0
    offsets: List[Optional[int]] = []
    for header in headers:
        if header is None:
            offsets.append(None)
            continue
        offsets.append(column)
        sheet.paste(header, column_offset=column)
        column += header.column_count
        header_height = max(header_height, header.row_count)

    row = header_height
    for record in records:
        converted = session.convert(record)
        block_height = 1
        for offset, section in zip(offsets, converted):
            if section is None or offset is None:
                continue
            sheet.paste(section.body, column_offset=offset, row_offset=row)
            block_height = max(block_height, section.body.row_count)
        row += block_height
    return sheet
