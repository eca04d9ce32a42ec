"""Value translation for exported cells.

Maps raw coded tokens stored on patient records to display strings.

Rules:
- A token found in the translation table uses the table's display string
- Otherwise a token in the self-descriptive set is capitalized
- Otherwise the raw value is rendered verbatim
- Missing values render as ''
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from .cells import CellValue, StyleTag
from .naming import capitalize

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y.%m.%d"
UNKNOWN_USER = "Unknown user"


class ValueTranslator:
    """Table-driven translator with a capitalization fallback."""

    def __init__(
        self,
        table: Mapping[str, str],
        self_descriptive: Iterable[str] = (),
    ) -> None:
        self.table = MappingProxyType(dict(table))
        self.self_descriptive = frozenset(self_descriptive)

    def __call__(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ", ".join(t for t in (self(v) for v in value) if t)
        token = value if isinstance(value, str) else str(value)
        if not token:
            return ""
        translated = self.table.get(token)
        if translated is not None:
            return translated
        if token in self.self_descriptive:
            return capitalize(token)
        logger.debug("no translation for token %r; exporting raw value", token)
        return token


GENE_VALUES = ValueTranslator(
    {
        "sequencing": "Sequencing",
        "deletion": "Deletion/duplication",
        "familial_mutation": "Familial mutation",
        "common_mutations": "Common mutations",
        "solved": "Confirmed causal",
        "rejected": "Negative",
        "candidate": "Candidate",
    }
)

VARIANT_VALUES = ValueTranslator(
    {
        "likely_pathogenic": "Likely Pathogenic",
        "likely_benign": "Likely Benign",
        "variant_u_s": "Variant of Unknown Significance",
        "investigation_n": "Investigation Needed",
        "not_segregates": "Does not segregate",
        "denovo_germline": "de novo germline",
        "denovo_s_mosaicism": "de novo somatic mosaicism",
        "insertion_in_frame": "insertion - in frame",
        "deletion_in_frame": "deletion - in frame",
        "deletion_frameshift": "deletion - frameshift",
        "insertion_frameshift": "insertion - frameshift",
        "indel_in_frame": "indel - in frame",
        "indel_frameshift": "indel - frameshift",
        "repeat_expansion": "repeat expansion",
    },
    self_descriptive=(
        "pathogenic",
        "benign",
        "unknown",
        "missense",
        "nonsense",
        "segregates",
        "duplication",
        "synonymous",
        "other",
        "maternal",
        "paternal",
        "negative",
        "positive",
    ),
)

# Order is the order descriptions are concatenated in.
EVIDENCE_DESCRIPTIONS = (
    ("rare", "Rare (MAF<0.01); "),
    ("predicted", "Predicted damaging by in silico models; "),
    ("reported", "Reported in other affected individuals; "),
)


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def integer_to_str_bool(value: Any) -> str:
    """1 -> 'Yes', 0 -> 'No', anything else -> ''."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if value == 1:
        return "Yes"
    if value == 0:
        return "No"
    return ""


def str_integer_to_str_bool(value: Any) -> str:
    """Like ``integer_to_str_bool`` for integers stored as strings."""
    if isinstance(value, str):
        try:
            return integer_to_str_bool(int(value.strip()))
        except ValueError:
            return ""
    return integer_to_str_bool(value)


def parse_evidence(value: Any) -> str:
    """Expand a variant evidence value into its descriptions.

    Accepts a list of tokens or a single string containing tokens.
    """
    if isinstance(value, (list, tuple)):
        tokens = " ".join(v for v in value if isinstance(v, str))
    elif isinstance(value, str):
        tokens = value
    else:
        return ""
    if not tokens.strip():
        return ""
    return "".join(text for key, text in EVIDENCE_DESCRIPTIONS if key in tokens)


def format_date(value: Any) -> str:
    """Format an ISO date/datetime (string or object) as ``yyyy.mm.dd``."""
    if value is None or value == "":
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(raw).strftime(DATE_FORMAT)
        except ValueError:
            pass
        try:
            return date.fromisoformat(raw[:10]).strftime(DATE_FORMAT)
        except ValueError:
            logger.debug("unparseable date %r; exporting raw value", value)
            return value
    return as_text(value)


def username(reference: Optional[str]) -> str:
    """Display name for a user reference such as ``XWiki.jdoe``."""
    if not isinstance(reference, str) or not reference.strip():
        return UNKNOWN_USER
    return reference.strip().rsplit(".", 1)[-1]


def presence(value: Any) -> CellValue:
    """Yes/No label for an observed/excluded finding."""
    if value:
        return CellValue("Yes", frozenset({StyleTag.YES}))
    return CellValue("No", frozenset({StyleTag.NO, StyleTag.YES_NO_SEPARATOR}))


def allergy(value: Any) -> Any:
    text = as_text(value)
    if text == "NKDA":
        return CellValue(text, frozenset({StyleTag.YES}))
    return text
