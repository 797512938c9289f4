"""Shared types and validation helpers for resources.

This module contains:
- Validation mode type (shared across all resources)
- Tag color normalization to the ``#rrggbb`` form paperless-ngx stores
- Common validation normalizers (ID sequences, names)
"""

from __future__ import annotations

import re
from typing import Literal, Sequence

from ..utils import unique_in_order

# --- Shared Validation Mode --- #
ValidationMode = Literal["off", "warn", "strict"]


# --- Color Normalization --- #
DEFAULT_TAG_COLOR = "#4a90d9"

_HEX_PATTERN = re.compile(
    r"^\s*#?([0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8})\s*$",
    flags=re.IGNORECASE,
)


def _normalize_color(value: object) -> str | None:
    """Normalize color inputs to a lowercase ``#rrggbb`` string.

    Parameters
    ----------
    value
        Color input. Supported forms:
        - ``None`` or the string ``"None"`` (case-insensitive)
        - Hex strings (``#RGB``, ``#RGBA``, ``#RRGGBB``, ``#RRGGBBAA``), with
          or without the leading ``#``; alpha is dropped
        - RGB/RGBA tuples or lists (ints 0-255 or floats 0-1)
        - Packed RGB integer (``0xRRGGBB``, ``0xAARRGGBB``)

    Returns
    -------
    str or None
        The ``#rrggbb`` color, or ``None`` when the input is ``None``.

    Raises
    ------
    ValueError
        If the input cannot be parsed as a color value.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Unsupported input type {type(value)}")
    if isinstance(value, str):
        if value.strip().lower() == "none":
            return None
        hex_match = _HEX_PATTERN.match(value)
        if not hex_match:
            raise ValueError(f"Unsupported string input {value!r}")
        hex_value = hex_match.group(1).lower()
        if len(hex_value) in (3, 4):
            hex_value = "".join(ch * 2 for ch in hex_value)
        return "#" + hex_value[:6]

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Negative packed int {value!r}")
        return f"#{value & 0xFFFFFF:06x}"

    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        rgb_values = value[:3]
        if all(isinstance(channel, (int, float)) and not isinstance(channel, bool) for channel in rgb_values):
            rgb = []
            for channel in rgb_values:
                channel_value = float(channel)
                if isinstance(channel, float) and channel_value <= 1:
                    channel_value *= 255
                rgb.append(int(max(0, min(255, round(channel_value)))))
            return "#{:02x}{:02x}{:02x}".format(*rgb)
        raise ValueError(f"Invalid RGB tuple values {value!r}")

    raise ValueError(f"Unsupported input type {type(value)}")


# --- Name Validation --- #
def _is_valid_name(value: object) -> bool:
    """Return True for non-blank strings."""
    return isinstance(value, str) and bool(value.strip())


# --- ID Sequence Normalization --- #
def _normalize_id_sequence(ids: int | Sequence[int] | object) -> list[int] | None:
    """Normalize single ID or sequence of IDs to a deduplicated list.

    Parameters
    ----------
    ids
        Single integer ID or sequence of integer IDs.

    Returns
    -------
    list[int] | None
        Deduplicated list of valid IDs (>= 1), or None if:
        - Input is not int or sequence (or is str/bytes)
        - No valid IDs found (all < 1)
    """
    if isinstance(ids, bool):
        return None
    if isinstance(ids, int):
        id_list = [ids]
    elif isinstance(ids, Sequence) and not isinstance(ids, (str, bytes)):
        id_list = list(ids)
    else:
        return None

    valid_ids = [
        id_val for id_val in id_list
        if isinstance(id_val, int) and not isinstance(id_val, bool) and id_val >= 1
    ]
    if not valid_ids:
        return None

    return unique_in_order(valid_ids)
