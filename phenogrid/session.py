"""Export session: resolves enabled fields once, then converts records.

Provides:
- ``ExportSession``: per-export context holding the present columns of every
  section
- ``SectionGrids``: header and body grids of one section for one record
- ``ColumnCountMismatch`` / ``SessionNotReady`` errors

Rules:
- ``setup`` must run before any header or body is built
- Present columns are written during ``setup`` only
- A section whose header and body column counts differ aborts the export
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set

from .cells import Grid
from .layout import build_body, build_header
from .overflow import CHARACTERS_PER_LINE
from .record import PatientRecord
from .resolver import resolve_columns
from .sections import SECTIONS, SectionDescriptor

logger = logging.getLogger(__name__)


class SessionNotReady(RuntimeError):
    """Raised when headers or bodies are requested before ``setup``."""


class ColumnCountMismatch(RuntimeError):
    """Raised when a section's header and body cover different columns."""

    def __init__(self, section: str, header_columns: int, body_columns: int) -> None:
        super().__init__(
            f"section {section!r}: header has {header_columns} columns, "
            f"body has {body_columns}"
        )
        self.section = section
        self.header_columns = header_columns
        self.body_columns = body_columns


@dataclass(frozen=True)
class SectionGrids:
    name: str
    header: Grid
    body: Grid

    @property
    def column_count(self) -> int:
        return self.header.column_count


class ExportSession:
    """Holds the resolved present columns for one export."""

    def __init__(
        self,
        sections: Sequence[SectionDescriptor] = SECTIONS,
        characters_per_line: int = CHARACTERS_PER_LINE,
    ) -> None:
        self.sections = tuple(sections)
        self.characters_per_line = characters_per_line
        self._present: Optional[Mapping[str, FrozenSet[Enum]]] = None
        self.unclaimed_fields: FrozenSet[str] = frozenset()

    @classmethod
    def for_fields(cls, enabled_fields: Iterable[str], **kwargs) -> "ExportSession":
        session = cls(**kwargs)
        session.setup(enabled_fields)
        return session

    def setup(self, enabled_fields: Iterable[str]) -> Mapping[str, FrozenSet[Enum]]:
        """Resolve requested field ids to present columns for every section.

        The caller's collection is not modified; field ids no section claims
        are kept in ``unclaimed_fields`` and logged.
        """
        if self._present is not None:
            raise RuntimeError("export session is already set up")
        remaining: Set[str] = {f for f in enabled_fields if isinstance(f, str)}
        present: Dict[str, FrozenSet[Enum]] = {}
        for section in self.sections:
            present[section.name] = resolve_columns(section.rules, remaining)
        self.unclaimed_fields = frozenset(remaining)
        if remaining:
            logger.warning("ignoring unknown export fields: %s", ", ".join(sorted(remaining)))
        self._present = MappingProxyType(present)
        return self._present

    @property
    def present_columns(self) -> Mapping[str, FrozenSet[Enum]]:
        if self._present is None:
            raise SessionNotReady("ExportSession.setup() must run before building sections")
        return self._present

    def present(self, section: SectionDescriptor) -> FrozenSet[Enum]:
        return self.present_columns.get(section.name, frozenset())

    def header(self, section: SectionDescriptor) -> Optional[Grid]:
        return build_header(section, self.present(section))

    def body(self, section: SectionDescriptor, record: PatientRecord) -> Optional[Grid]:
        return build_body(section, self.present(section), record, self.characters_per_line)

    def headers(self) -> List[Optional[Grid]]:
        return [self.header(section) for section in self.sections]

    def convert(self, record: PatientRecord) -> List[Optional[SectionGrids]]:
        """Build header/body pairs for ``record`` in section order (None = absent)."""
        out: List[Optional[SectionGrids]] = []
        for section in self.sections:
            header = self.header(section)
            body = self.body(section, record)
            if header is None or body is None:
                if header is not None or body is not None:
                    raise ColumnCountMismatch(
                        section.name,
                        header.column_count if header is not None else 0,
                        body.column_count if body is not None else 0,
                    )
                out.append(None)
                continue
            if header.column_count != body.column_count:
                raise ColumnCountMismatch(section.name, header.column_count, body.column_count)
            out.append(SectionGrids(section.name, header, body))
        return out
