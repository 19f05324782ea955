from __future__ import annotations

import re

"""Field value normalization.

Pure functions, no I/O. The month and year rules only apply to the fields
configured as month/year (MES and ANIO by default); every value then loses a
single leading "/" left over from PDF name syntax (e.g. "/Yes").
"""

__all__ = [
    "FALSY_VALUES",
    "normalize_month",
    "normalize_year",
    "is_truthy",
    "strip_checkbox_prefix",
    "normalize_field",
]

FALSY_VALUES = frozenset({"0", "false", "no", "off"})

_NON_DIGITS = re.compile(r"[^0-9]")  # ASCII digits only


def _digits(raw: str) -> str:
    return _NON_DIGITS.sub("", raw)


def normalize_month(raw: str) -> str:
    """'3' -> '03'; values without digits come back unchanged."""
    digits = _digits(raw)
    if not digits:
        return raw
    return digits.rjust(2, "0")


def normalize_year(raw: str) -> str:
    """'23' -> '2023', '2023' stays; any other digit count returns raw unchanged."""
    digits = _digits(raw)
    match len(digits):
        case 2:
            return f"20{digits}"
        case 4:
            return digits
        case _:
            return raw


def is_truthy(raw: str) -> bool:
    s = raw.strip().lower()
    return not (s == "" or s in FALSY_VALUES)


def strip_checkbox_prefix(value: str) -> str:
    if value.startswith("/"):
        return value[1:]
    return value


def normalize_field(name: str, raw: str, *, month_field: str = "MES", year_field: str = "ANIO") -> str:
    """Apply the month/year rule matching ``name`` (exact match), if any.

    The result still carries a leading "/" if the input had one; output
    filenames are built from this value.
    """
    if name == month_field:
        return normalize_month(raw)
    if name == year_field:
        return normalize_year(raw)
    return raw
