"""Utility functions for input coercion and parsing."""

import json
import re

from clave.errors import ValidationError

__all__ = [
    "parse_matrix",
    "parse_size",
    "to_bytes",
]


def to_bytes(value: str | bytes | bytearray | memoryview | None, name: str = "value") -> bytes:
    """Coerce an optional text or bytes-like argument to bytes (text as UTF-8)."""
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"{name} must be str or bytes, not {type(value).__name__}")


_ROW_SEP = re.compile(r"[;\n]")
_VALUE_SEP = re.compile(r"[,\s]+")


def parse_matrix(text: str) -> list[list[float]]:
    """Parse a matrix from its command-line text form.

    Rows are separated by ``;`` or newlines, values by commas or whitespace:
    ``"2,2.3,4; 7,7.8,7"``. A JSON array of arrays is accepted as well.
    A blank row between two separators is kept as an empty row; leading and
    trailing blank lines are ignored.
    """
    s = text.strip()
    if s.startswith("["):
        try:
            data = json.loads(s)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid matrix JSON: {e}") from None
        if not isinstance(data, list) or not all(isinstance(row, list) for row in data):
            raise ValidationError("matrix must be a sequence of number sequences")
        return data

    if not s:
        return []
    rows = []
    for line in _ROW_SEP.split(s):
        tokens = [t for t in _VALUE_SEP.split(line.strip()) if t]
        try:
            rows.append([float(t) for t in tokens])
        except ValueError:
            raise ValidationError(f"Invalid matrix row: {line.strip()!r}") from None
    return rows


_PREFIXES = {
    "": 1,
    "k": 1000,
    "m": 1000**2,
    "g": 1000**3,
    "ki": 1024,
    "mi": 1024**2,
    "gi": 1024**3,
}


def parse_size(length: str) -> int:
    """Parse size string with SI/IEC prefixes.

    Supports plain numbers (``32``, ``1_000``), SI prefixes k, m, g (powers
    of 1000) and IEC prefixes ki, mi, gi (powers of 1024), each with an
    optional ``b`` suffix. Case insensitive.
    """
    s = length.strip().lower().replace("_", "")
    m = re.match(r"^(\d+)\s*(ki|mi|gi|k|m|g|)b?$", s)
    if not m:
        raise ValueError(f"Invalid size format: {length}")
    num, prefix = m.groups()
    return int(num) * _PREFIXES[prefix]
