"""Tag resource wrapper."""

from __future__ import annotations

from typing import Optional, Sequence, cast

from .base import Resource
from .tags_types import TagResponse
from ._common_types import (
    DEFAULT_TAG_COLOR,
    ValidationMode,
    _is_valid_name,
    _normalize_color,
    _normalize_id_sequence,
)
from ..utils import slugify


class Tags(Resource):
    """Tag operations."""

    def list(
        self,
        *,
        timeout: Optional[int] = None,
    ) -> list[TagResponse] | None:
        """Fetch all tags, following pagination.

        Parameters
        ----------
        timeout
            Request timeout in seconds.

        Returns
        -------
        list[TagResponse] or None
            List of tag dicts, or ``None`` on error.
        """
        tags = self._get_all("/tags/", timeout=timeout)
        return cast("list[TagResponse] | None", tags)

    def add(
        self,
        name: str,
        *,
        color: Optional[object] = None,
        matching_algorithm: int = 0,
        is_insensitive: bool = True,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> TagResponse | None:
        """Create a new tag.

        Parameters
        ----------
        name
            Tag name.
        color
            Tag color in any form accepted by ``_normalize_color``; defaults to
            ``DEFAULT_TAG_COLOR``.
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
        TagResponse or None
            Created tag dict, or ``None`` on error.
        """
        if validation != "off":
            if not _is_valid_name(name):
                if validation == "strict":
                    raise ValueError(f"Invalid name: {name}")
                self._logger.warning("Invalid name for tag add: %s", name)
                return None
            try:
                color = _normalize_color(color)
            except ValueError as e:
                if validation == "strict":
                    raise ValueError(f"Invalid color: {e}") from e
                self._logger.warning("Invalid color for tag add: %s", color)
                return None

        payload: dict[str, object] = {
            "name": name,
            "slug": slugify(name) if isinstance(name, str) else name,
            "color": color or DEFAULT_TAG_COLOR,
            "matching_algorithm": matching_algorithm,
            "is_insensitive": is_insensitive,
            # Tags are public unless an owner is set
            "owner": None,
        }
        response = self._post("/tags/", json=payload, timeout=timeout)
        return cast("TagResponse | None", self._created(response, "tag"))

    def delete(
        self,
        tag_ids: Sequence[int] | int,
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> bool:
        """Delete one or more tags by ID.

        Parameters
        ----------
        tag_ids
            Tag ID or iterable of tag identifiers.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        bool
            ``True`` when every delete request succeeds.
        """
        if validation == "off":
            ids = [tag_ids] if isinstance(tag_ids, int) else list(tag_ids)
        else:
            ids = _normalize_id_sequence(tag_ids)
            if ids is None:
                if validation == "strict":
                    raise ValueError(f"Invalid tag_ids: {tag_ids}")
                self._logger.warning("Invalid tag_ids for delete: %s", tag_ids)
                return False

        return self._delete_each("tags", ids, timeout=timeout)
