"""Custom field resource wrapper."""

from __future__ import annotations

from typing import Optional, Sequence, cast

from .base import Resource
from .custom_fields_types import (
    CustomFieldResponse,
    _normalize_data_type,
    _normalize_select_options,
)
from ._common_types import ValidationMode, _is_valid_name, _normalize_id_sequence


class CustomFields(Resource):
    """Custom field operations."""

    def list(self, *, timeout: Optional[int] = None) -> list[CustomFieldResponse] | None:
        """Fetch all custom field definitions, or ``None`` on error."""
        custom_fields = self._get_all("/custom_fields/", timeout=timeout)
        return cast("list[CustomFieldResponse] | None", custom_fields)

    def add(
        self,
        name: str,
        data_type: str = "string",
        *,
        options: Optional[Sequence[str]] = None,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> CustomFieldResponse | None:
        """Create a custom field definition.

        Parameters
        ----------
        name
            Field name.
        data_type
            Field data type (see ``CUSTOM_FIELD_DATA_TYPES``).
        options
            Choices for ``select`` fields; must be omitted for other types.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        CustomFieldResponse or None
            Created custom field dict, or ``None`` on error.
        """
        if validation != "off":
            try:
                if not _is_valid_name(name):
                    raise ValueError(f"Invalid name: {name}")
                data_type = _normalize_data_type(data_type)
                if data_type == "select":
                    options = list(_normalize_select_options(options))
                elif options:
                    raise ValueError(f"Options are only valid for select fields, not {data_type}")
            except ValueError as e:
                if validation == "strict":
                    raise
                self._logger.warning("Invalid custom field for add: %s", e)
                return None

        payload: dict[str, object] = {"name": name, "data_type": data_type}
        if options:
            payload["extra_data"] = {"select_options": list(options)}
        response = self._post("/custom_fields/", json=payload, timeout=timeout)
        return cast("CustomFieldResponse | None", self._created(response, "custom field"))

    def delete(
        self,
        custom_field_ids: Sequence[int] | int,
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> bool:
        """Delete one or more custom fields by ID; ``True`` when all succeed."""
        if validation == "off":
            ids = [custom_field_ids] if isinstance(custom_field_ids, int) else list(custom_field_ids)
        else:
            ids = _normalize_id_sequence(custom_field_ids)
            if ids is None:
                if validation == "strict":
                    raise ValueError(f"Invalid custom_field_ids: {custom_field_ids}")
                self._logger.warning("Invalid custom_field_ids for delete: %s", custom_field_ids)
                return False

        return self._delete_each("custom_fields", ids, timeout=timeout)
