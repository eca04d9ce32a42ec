"""Overflow wrapping for long free-text values.

Long notes are stacked vertically in one column instead of being written
into a single oversized cell.
"""

from __future__ import annotations

from typing import List, Optional

from .cells import Cell

CHARACTERS_PER_LINE = 100


def split_segments(text: Optional[str], width: int = CHARACTERS_PER_LINE) -> List[str]:
    """Split ``text`` into segments of at most ``width`` characters.

    Rules:
    - Tokens are separated by single spaces; a token is never split
    - A token longer than ``width`` becomes a segment of its own
    - ``" ".join(segments)`` reproduces ``text`` exactly
    - Empty or missing text yields ``[""]``
    """
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")
    if not text:
        return [""]

    segments: List[str] = []
    current: Optional[str] = None
    for token in text.split(" "):
        if current is None:
            current = token
        elif len(current) + 1 + len(token) <= width:
            current = f"{current} {token}"
        else:
            segments.append(current)
            current = token
    segments.append(current if current is not None else "")
    return segments


def prevent_overflow(
    text: Optional[str],
    column: int,
    row: int,
    width: int = CHARACTERS_PER_LINE,
) -> List[Cell]:
    """Return multiline cells holding ``text``, stacked from ``row`` at ``column``."""
    return [
        Cell(column, row + offset, segment, multiline=True)
        for offset, segment in enumerate(split_segments(text, width))
    ]
