"""Document type resource wrapper."""

from __future__ import annotations

from typing import Optional, Sequence, cast

from .base import Resource
from .document_types_types import DocumentTypeResponse
from ._common_types import ValidationMode, _is_valid_name, _normalize_id_sequence
from ..utils import slugify


class DocumentTypes(Resource):
    """Document type operations."""

    def list(self, *, timeout: Optional[int] = None) -> list[DocumentTypeResponse] | None:
        """Fetch all document types, or ``None`` on error."""
        document_types = self._get_all("/document_types/", timeout=timeout)
        return cast("list[DocumentTypeResponse] | None", document_types)

    def add(
        self,
        name: str,
        *,
        matching_algorithm: int = 0,
        is_insensitive: bool = True,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> DocumentTypeResponse | None:
        """Create a document type.

        Parameters
        ----------
        name
            Document type name.
        matching_algorithm
            Paperless auto-matching algorithm id (``0`` is none).
        is_insensitive
            Whether auto-matching ignores case.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        DocumentTypeResponse or None
            Created document type dict, or ``None`` on error.
        """
        if validation != "off" and not _is_valid_name(name):
            if validation == "strict":
                raise ValueError(f"Invalid name: {name}")
            self._logger.warning("Invalid name for document type add: %s", name)
            return None

        payload: dict[str, object] = {
            "name": name,
            "slug": slugify(name) if isinstance(name, str) else name,
            "matching_algorithm": matching_algorithm,
            "is_insensitive": is_insensitive,
        }
        response = self._post("/document_types/", json=payload, timeout=timeout)
        return cast("DocumentTypeResponse | None", self._created(response, "document type"))

    def delete(
        self,
        document_type_ids: Sequence[int] | int,
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> bool:
        """Delete one or more document types by ID; ``True`` when all succeed."""
        if validation == "off":
            ids = [document_type_ids] if isinstance(document_type_ids, int) else list(document_type_ids)
        else:
            ids = _normalize_id_sequence(document_type_ids)
            if ids is None:
                if validation == "strict":
                    raise ValueError(f"Invalid document_type_ids: {document_type_ids}")
                self._logger.warning("Invalid document_type_ids for delete: %s", document_type_ids)
                return False

        return self._delete_each("document_types", ids, timeout=timeout)
