"""Types for the tags resource.

Tag inputs are simple primitives (name, color, matching flags); validation
stays inline in tags.py.
"""

from __future__ import annotations

from typing import TypedDict
from typing_extensions import ReadOnly


class TagResponse(TypedDict, total=False):
    """Readonly tag dict returned by tag endpoints."""
    id: ReadOnly[int]
    name: ReadOnly[str]
    slug: ReadOnly[str]
    color: ReadOnly[str]
    match: ReadOnly[str]
    matching_algorithm: ReadOnly[int]
    is_insensitive: ReadOnly[bool]
    document_count: ReadOnly[int]

__all__ = ["TagResponse"]
