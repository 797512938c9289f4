"""Types for the storage_paths resource."""

from __future__ import annotations

from typing import TypedDict
from typing_extensions import ReadOnly


class StoragePathResponse(TypedDict, total=False):
    """Readonly storage path dict returned by storage path endpoints."""
    id: ReadOnly[int]
    name: ReadOnly[str]
    path: ReadOnly[str]
    slug: ReadOnly[str]
    document_count: ReadOnly[int]

__all__ = ["StoragePathResponse"]
