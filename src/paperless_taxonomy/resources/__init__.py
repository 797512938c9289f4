"""Resource module exports."""

from .custom_fields import CustomFields
from .document_types import DocumentTypes
from .storage_paths import StoragePaths
from .tags import Tags

__all__ = [
    "CustomFields",
    "DocumentTypes",
    "StoragePaths",
    "Tags",
]
