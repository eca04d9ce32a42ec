"""Read-only accessors over a patient record document.

Records arrive as plain JSON-like dictionaries. Every accessor probes by
name and returns ``None`` or an empty collection when data is missing or
malformed; malformed data is logged and never raised, so one bad record
cannot abort a batch export.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

PRENATAL_FEATURE_TYPE = "prenatal_phenotype"


@dataclass(frozen=True)
class FeatureMetadatum:
    id: str
    name: str


@dataclass(frozen=True)
class Feature:
    id: str
    name: str
    present: bool = True
    type: str = "phenotype"
    category: Optional[str] = None
    metadata: Tuple[FeatureMetadatum, ...] = field(default_factory=tuple)

    @property
    def is_prenatal(self) -> bool:
        return self.type == PRENATAL_FEATURE_TYPE


@dataclass(frozen=True)
class Disorder:
    id: str
    name: str


def _as_nonempty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class PatientRecord:
    """Named accessors over one patient document."""

    def __init__(self, data: Dict[str, Any]) -> None:
        if not isinstance(data, dict):
            raise TypeError(f"patient record must be a mapping, got {type(data).__name__}")
        self._data = data

    def __repr__(self) -> str:
        return f"PatientRecord(id={self.id!r})"

    @property
    def id(self) -> str:
        return _as_str(self._data.get("id"))

    @property
    def external_id(self) -> Optional[str]:
        return _as_nonempty_str(self._data.get("external_id"))

    def get(self, name: str) -> Any:
        """Top-level value ``name`` (None when absent)."""
        return self._data.get(name)

    def group(self, name: str) -> Dict[str, Any]:
        """A keyed sub-document such as ``notes`` or ``apgar``; {} when absent."""
        value = self._data.get(name)
        if value is None:
            return {}
        if not isinstance(value, dict):
            logger.warning("record %s: %r is not a mapping; ignoring it", self.id, name)
            return {}
        return value

    def value(self, group: str, key: str) -> Any:
        return self.group(group).get(key)

    def text(self, group: str, key: str) -> Optional[str]:
        value = self.value(group, key)
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def values(self, group: str, key: str) -> List[Any]:
        """A list-valued entry of a sub-document; a scalar becomes a one-item list."""
        value = self.value(group, key)
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [v for v in value if v is not None]
        return [value]

    def indexed(self, name: str) -> List[Dict[str, Any]]:
        """A top-level list of sub-records (genes, variants, ...)."""
        value = self._data.get(name)
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("record %s: %r is not a list; exporting it as empty", self.id, name)
            return []
        return [item for item in value if isinstance(item, dict)]

    def items(self, name: str) -> List[Any]:
        """A top-level list of scalars (allergies, ...)."""
        value = self._data.get(name)
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("record %s: %r is not a list; exporting it as empty", self.id, name)
            return []
        return [item for item in value if item is not None]

    def features(self) -> List[Feature]:
        out: List[Feature] = []
        for raw in self.indexed("features"):
            feature_id = _as_str(raw.get("id"))
            name = _as_str(raw.get("name") or raw.get("label"))
            if not feature_id and not name:
                continue
            metadata: List[FeatureMetadatum] = []
            raw_meta = raw.get("metadata")
            if isinstance(raw_meta, dict):
                raw_meta = list(raw_meta.values())
            if isinstance(raw_meta, list):
                for meta in raw_meta:
                    if isinstance(meta, dict):
                        metadata.append(
                            FeatureMetadatum(_as_str(meta.get("id")), _as_str(meta.get("name")))
                        )
            # Unpopulated presence means observed.
            present = raw.get("present")
            if present is None:
                present = True
            elif isinstance(present, str):
                present = present.strip().lower() not in {"no", "false", "0", "absent"}
            out.append(
                Feature(
                    id=feature_id,
                    name=name,
                    present=bool(present),
                    type=_as_str(raw.get("type")) or "phenotype",
                    category=_as_nonempty_str(raw.get("category")),
                    metadata=tuple(metadata),
                )
            )
        return out

    def disorders(self) -> List[Disorder]:
        return [
            Disorder(_as_str(raw.get("id")), _as_str(raw.get("name") or raw.get("label")))
            for raw in self.indexed("disorders")
        ]
