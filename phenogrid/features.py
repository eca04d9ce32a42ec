"""Selection and ordering of phenotype findings before layout.

Grouping columns only compress runs of adjacent equal values, so findings
must be sorted into presence and category blocks first.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .record import Feature


def select_features(
    features: Iterable[Feature],
    prenatal: bool,
    positive: bool,
    negative: bool,
) -> List[Feature]:
    """Keep findings of the requested kind whose presence status is enabled."""
    selected: List[Feature] = []
    for feature in features:
        if feature.is_prenatal != prenatal:
            continue
        if feature.present and not positive:
            continue
        if not feature.present and not negative:
            continue
        selected.append(feature)
    return selected


def category_ranks(features: Iterable[Feature]) -> Dict[Optional[str], int]:
    """Rank categories by first appearance; uncategorized findings rank last."""
    ranks: Dict[Optional[str], int] = {}
    for feature in features:
        if feature.category is not None and feature.category not in ranks:
            ranks[feature.category] = len(ranks)
    ranks[None] = len(ranks)
    return ranks


def sort_features(
    features: List[Feature],
    by_presence: bool,
    by_category: bool,
) -> List[Feature]:
    """Order findings by presence, then category, then their original order.

    Observed findings come before excluded ones when ``by_presence`` is set.
    """
    ranks = category_ranks(features) if by_category else {}

    def key(indexed: tuple[int, Feature]) -> tuple[int, int, int]:
        index, feature = indexed
        presence_key = (0 if feature.present else 1) if by_presence else 0
        category_key = ranks.get(feature.category, len(ranks)) if by_category else 0
        return (presence_key, category_key, index)

    return [feature for _, feature in sorted(enumerate(features), key=key)]
