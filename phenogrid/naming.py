"""Naming helpers.

Centralizes deterministic display-name formatting for exported values.
"""

from __future__ import annotations


def capitalize(token: str) -> str:
    """Upper-case the first character and leave the rest untouched.

    ``"pathogenic"`` -> ``"Pathogenic"``, ``"de novo"`` -> ``"De novo"``.
    """
    if not token:
        return token
    return token[:1].upper() + token[1:]
