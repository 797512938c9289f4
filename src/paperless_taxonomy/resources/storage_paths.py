"""Storage path resource wrapper."""

from __future__ import annotations

from typing import Optional, Sequence, cast

from .base import Resource
from .storage_paths_types import StoragePathResponse
from ._common_types import ValidationMode, _is_valid_name, _normalize_id_sequence
from ..utils import path_display_name


class StoragePaths(Resource):
    """Storage path operations."""

    def list(self, *, timeout: Optional[int] = None) -> list[StoragePathResponse] | None:
        """Fetch all storage paths, or ``None`` on error."""
        storage_paths = self._get_all("/storage_paths/", timeout=timeout)
        return cast("list[StoragePathResponse] | None", storage_paths)

    def add(
        self,
        path: str,
        *,
        name: Optional[str] = None,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> StoragePathResponse | None:
        """Create a storage path.

        Paperless enforces unique names per owner, so ``name`` defaults to the
        whole normalized ``path`` without its leading slash.

        Parameters
        ----------
        path
            Storage path template, e.g. ``/household/tax``.
        name
            Display name.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        StoragePathResponse or None
            Created storage path dict, or ``None`` on error.
        """
        if validation != "off":
            if not _is_valid_name(path):
                if validation == "strict":
                    raise ValueError(f"Invalid path: {path}")
                self._logger.warning("Invalid path for storage path add: %s", path)
                return None
            if name is not None and not _is_valid_name(name):
                if validation == "strict":
                    raise ValueError(f"Invalid name: {name}")
                self._logger.warning("Invalid name for storage path add: %s", name)
                return None

        if name is None and isinstance(path, str):
            name = path_display_name(path)
        payload: dict[str, object] = {"name": name, "path": path}
        response = self._post("/storage_paths/", json=payload, timeout=timeout)
        return cast("StoragePathResponse | None", self._created(response, "storage path"))

    def delete(
        self,
        storage_path_ids: Sequence[int] | int,
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> bool:
        """Delete one or more storage paths by ID; ``True`` when all succeed."""
        if validation == "off":
            ids = [storage_path_ids] if isinstance(storage_path_ids, int) else list(storage_path_ids)
        else:
            ids = _normalize_id_sequence(storage_path_ids)
            if ids is None:
                if validation == "strict":
                    raise ValueError(f"Invalid storage_path_ids: {storage_path_ids}")
                self._logger.warning("Invalid storage_path_ids for delete: %s", storage_path_ids)
                return False

        return self._delete_each("storage_paths", ids, timeout=timeout)
