"""Types for the document_types resource."""

from __future__ import annotations

from typing import TypedDict
from typing_extensions import ReadOnly


class DocumentTypeResponse(TypedDict, total=False):
    """Readonly document type dict returned by document type endpoints."""
    id: ReadOnly[int]
    name: ReadOnly[str]
    slug: ReadOnly[str]
    match: ReadOnly[str]
    matching_algorithm: ReadOnly[int]
    is_insensitive: ReadOnly[bool]
    document_count: ReadOnly[int]

__all__ = ["DocumentTypeResponse"]
