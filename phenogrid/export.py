"""Export layer for the patient sheet.

Implements the export run:
- Reads the enabled fields and paths from ``config/config.json``
- Loads patient records from a JSON file or directory
- Lays the records out with an ``ExportSession``
- Writes the assembled grid as ``.xlsx`` (openpyxl) or ``.csv``

Rules:
- Section and column order are fixed by the section table, not by the order
  of configured fields
- Cells are written as plain values; style tags are not rendered
"""

from __future__ import annotations

import csv
import os
from typing import Any, Dict, Iterable, List, Optional

from openpyxl import Workbook

from .cells import Grid
from .document import assemble
from .overflow import CHARACTERS_PER_LINE
from .record import PatientRecord
from .session import ExportSession
from .store.io import ensure_dir, load_record_documents, read_json

DEFAULT_CONFIG_PATH = os.path.join("config", "config.json")
DEFAULT_RECORDS_DIR = os.path.join("data", "records")
DEFAULT_EXPORT_PATH = os.path.join("data", "export", "patients.xlsx")
SHEET_TITLE = "Patients"
FORMATS = ("xlsx", "csv")


def load_config(config_path: str) -> Dict[str, Any]:
    """Load JSON configuration from ``config_path``.

    Raises ``RuntimeError`` if the file is missing or invalid.
    """
    data = read_json(config_path)
    if not isinstance(data, dict) or not data:
        raise RuntimeError(f"Missing or invalid config: {config_path}")
    return data


def _enabled_fields(cfg: Dict[str, Any]) -> List[str]:
    fields = cfg.get("enabled_fields")
    if not isinstance(fields, list):
        raise RuntimeError("config enabled_fields must be a list of field ids")
    return [f.strip() for f in fields if isinstance(f, str) and f.strip()]


def _characters_per_line(cfg: Dict[str, Any]) -> int:
    value = cfg.get("characters_per_line", CHARACTERS_PER_LINE)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise RuntimeError(f"config characters_per_line must be a positive integer: {value!r}")
    return value


def _format_for(path: str, requested: Optional[str]) -> str:
    if requested:
        fmt = requested.lower()
    else:
        fmt = os.path.splitext(path)[1].lstrip(".").lower() or "xlsx"
    if fmt not in FORMATS:
        raise RuntimeError(f"Unsupported export format: {fmt}")
    return fmt


def write_xlsx(grid: Grid, path: str, title: str = SHEET_TITLE) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for cell in grid:
        ws.cell(row=cell.row + 1, column=cell.column + 1, value=cell.value)
    ensure_dir(os.path.dirname(path))
    wb.save(path)


def write_csv(grid: Grid, path: str) -> None:
    ensure_dir(os.path.dirname(path))
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        for row in grid.to_matrix():
            writer.writerow(row)


def export_records(
    records: Iterable[PatientRecord],
    enabled_fields: Iterable[str],
    output_path: str,
    fmt: Optional[str] = None,
    characters_per_line: int = CHARACTERS_PER_LINE,
) -> Grid:
    """Lay out ``records`` for ``enabled_fields`` and write them to ``output_path``."""
    session = ExportSession.for_fields(enabled_fields, characters_per_line=characters_per_line)
    grid = assemble(session, records)
    if _format_for(output_path, fmt) == "csv":
        write_csv(grid, output_path)
    else:
        write_xlsx(grid, output_path)
    return grid


def run_export(
    config_path: str = DEFAULT_CONFIG_PATH,
    records_path: Optional[str] = None,
    output_path: Optional[str] = None,
    fmt: Optional[str] = None,
    extra_fields: Optional[List[str]] = None,
) -> int:
    """Export all configured records; CLI arguments override config values."""
    cfg = load_config(config_path)
    fields = _enabled_fields(cfg) + list(extra_fields or [])
    records_path = records_path or cfg.get("records_dir") or DEFAULT_RECORDS_DIR
    output_path = output_path or cfg.get("export_path") or DEFAULT_EXPORT_PATH
    fmt = fmt or cfg.get("format")

    documents = load_record_documents(records_path)
    records = [PatientRecord(doc) for doc in documents]
    if not records:
        print(f"export: no patient records found in {records_path}")

    grid = export_records(
        records,
        fields,
        output_path,
        fmt=fmt,
        characters_per_line=_characters_per_line(cfg),
    )
    print(
        f"export: wrote {output_path} "
        f"({len(records)} records, {grid.row_count} rows x {grid.column_count} columns)"
    )
    return 0
