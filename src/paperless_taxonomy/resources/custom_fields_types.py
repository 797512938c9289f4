"""Types and validation helpers for custom_fields resource."""

from __future__ import annotations

from typing import Literal, Sequence, TypedDict, get_args
from typing_extensions import ReadOnly

# --- Data Type Definitions --- #
CustomFieldDataType = Literal[
    "string", "longtext", "url", "date", "boolean", "integer", "float",
    "monetary", "documentlink", "select",
]
CUSTOM_FIELD_DATA_TYPES: tuple[CustomFieldDataType, ...] = get_args(CustomFieldDataType)

# Older taxonomy files use these names
_DATA_TYPE_ALIASES: dict[str, CustomFieldDataType] = {
    "text": "string",
    "number": "integer",
    "int": "integer",
    "bool": "boolean",
    "money": "monetary",
}


class CustomFieldExtraData(TypedDict, total=False):
    select_options: ReadOnly[list[object]]
    default_currency: ReadOnly[str | None]


class CustomFieldResponse(TypedDict, total=False):
    """Readonly custom field dict returned by custom field endpoints."""
    id: ReadOnly[int]
    name: ReadOnly[str]
    data_type: ReadOnly[CustomFieldDataType]
    extra_data: ReadOnly[CustomFieldExtraData]
    document_count: ReadOnly[int]


def _normalize_data_type(data_type: object) -> CustomFieldDataType:
    """Normalize a custom field data type name.

    Parameters
    ----------
    data_type
        One of ``CUSTOM_FIELD_DATA_TYPES`` or a legacy alias (``"number"``,
        ``"text"``, ...), case-insensitive.

    Returns
    -------
    CustomFieldDataType
        Canonical data type name.

    Raises
    ------
    ValueError
        If the data type is unknown.
    """
    if not isinstance(data_type, str):
        raise ValueError(f"Invalid custom field data type: {data_type!r}")
    lowered = data_type.strip().lower()
    if lowered in CUSTOM_FIELD_DATA_TYPES:
        return lowered  # type: ignore[return-value]
    if lowered in _DATA_TYPE_ALIASES:
        return _DATA_TYPE_ALIASES[lowered]
    raise ValueError(f"Invalid custom field data type: {data_type!r}")


def _normalize_select_options(options: Sequence[str] | object) -> tuple[str, ...]:
    """Return stripped, de-duplicated select options.

    Raises
    ------
    ValueError
        If ``options`` is not a sequence of non-blank strings, or is empty.
    """
    if not isinstance(options, Sequence) or isinstance(options, (str, bytes)):
        raise ValueError(f"Invalid select options: {options!r}")
    cleaned: list[str] = []
    for option in options:
        if not isinstance(option, str) or not option.strip():
            raise ValueError(f"Invalid select option: {option!r}")
        if option.strip() not in cleaned:
            cleaned.append(option.strip())
    if not cleaned:
        raise ValueError("Select fields need at least one option")
    return tuple(cleaned)


__all__ = [
    "CUSTOM_FIELD_DATA_TYPES",
    "CustomFieldDataType",
    "CustomFieldExtraData",
    "CustomFieldResponse",
]
