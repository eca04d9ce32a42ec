"""File-based JSON helpers for configuration and patient records.

Provides:
- directory creation
- tolerant JSON reads (missing or invalid files read as None)
- deterministic listing of JSON files in a directory
- loading patient record documents from a file or directory
"""

import json
import logging
import os
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


def ensure_dir(path: str) -> None:
    """Create a directory (and parents) if missing."""
    if path:
        os.makedirs(path, exist_ok=True)


def read_json(path: str) -> Optional[Any]:
    """Read JSON from disk; return None if missing or invalid."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("could not read %s: %s", path, exc)
        return None


def iter_json_files(dir_path: str) -> Iterable[str]:
    """Sorted paths of ``*.json`` files directly inside ``dir_path``."""
    if not os.path.isdir(dir_path):
        return []
    entries = [
        os.path.join(dir_path, name)
        for name in os.listdir(dir_path)
        if name.lower().endswith(".json")
    ]
    entries.sort()
    return entries


def _record_documents(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict) and isinstance(data.get("patients"), list):
        data = data["patients"]
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    return []


def load_record_documents(path: str) -> List[Dict[str, Any]]:
    """Load patient documents from a JSON file or a directory of JSON files.

    A file may hold one record, a list of records, or ``{"patients": [...]}``.
    Unreadable files are skipped with a warning.

    Raises ``RuntimeError`` if ``path`` does not exist.
    """
    if os.path.isdir(path):
        paths = list(iter_json_files(path))
    elif os.path.exists(path):
        paths = [path]
    else:
        raise RuntimeError(f"Missing records path: {path}")

    documents: List[Dict[str, Any]] = []
    for file_path in paths:
        data = read_json(file_path)
        if data is None:
            continue
        docs = _record_documents(data)
        if not docs:
            logger.warning("no patient records in %s", file_path)
        documents.extend(docs)
    return documents
