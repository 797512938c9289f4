"""Shared helpers for the paperless taxonomy client."""

from __future__ import annotations

import re
from typing import Hashable, Iterable, TypeVar

T = TypeVar("T", bound=Hashable)


def unique_in_order(values: Iterable[T]) -> list[T]:
    """Return unique values preserving the original order."""
    seen: set[T] = set()
    output: list[T] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        output.append(value)
    return output


def slugify(name: str) -> str:
    """Lowercase ``name`` and join whitespace runs with dashes."""
    return re.sub(r"\s+", "-", name.strip().lower())


def normalize_path(path: str) -> str:
    """Normalize a storage path string for comparison.

    Surrounding whitespace is dropped, repeated slashes collapse to one, a
    leading slash is added and a trailing slash removed. Case is preserved.
    """
    parts = [part.strip() for part in path.strip().split("/")]
    parts = [part for part in parts if part]
    return "/" + "/".join(parts)


def path_display_name(path: str) -> str:
    """Return the normalized ``path`` without its leading slash.

    Distinct normalized paths always give distinct names, e.g.
    ``/household/tax`` and ``/business/tax`` become ``household/tax`` and
    ``business/tax``.
    """
    normalized = normalize_path(path)
    return normalized.lstrip("/") or normalized
