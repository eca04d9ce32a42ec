"""Field enablement resolver.

Maps the field ids requested for an export onto the column ids each section
needs.

Rules:
- Rules are applied in order; each matched field id is removed from the
  caller's set so later sections cannot claim it again
- Columns from every matched rule are unioned (rules are not exclusive)
- The result is a set; presentation order comes from the section descriptor
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, MutableSet, Sequence, Tuple


@dataclass(frozen=True)
class FieldRule:
    field_id: str
    columns: FrozenSet[Enum]


def rule(field_id: str, *columns: Enum) -> FieldRule:
    return FieldRule(field_id, frozenset(columns))


def one_to_one(columns: Iterable[Enum]) -> Tuple[FieldRule, ...]:
    """Rules where each column is enabled by the field id equal to its value."""
    return tuple(rule(column.value, column) for column in columns)


def cumulative(field_ids: Sequence[str], columns: Sequence[Enum]) -> Tuple[FieldRule, ...]:
    """Rules where the n-th field id enables the first n columns.

    ``cumulative(["a", "b"], [X, Y])`` -> ``a -> {X}``, ``b -> {X, Y}``.
    """
    if len(field_ids) != len(columns):
        raise ValueError("cumulative rules need one field id per column")
    return tuple(
        rule(field_id, *columns[: index + 1]) for index, field_id in enumerate(field_ids)
    )


def resolve_columns(rules: Iterable[FieldRule], enabled: MutableSet[str]) -> FrozenSet[Enum]:
    """Consume matched field ids from ``enabled`` and return the implied columns."""
    present: set[Enum] = set()
    for field_rule in rules:
        if field_rule.field_id in enabled:
            enabled.discard(field_rule.field_id)
            present.update(field_rule.columns)
    return frozenset(present)
