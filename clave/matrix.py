"""Matrix validation and canonical byte encoding.

The canonical encoding is the one wire format of the package and must stay
bit-exact across platforms:

    >I row count
    for each row:
        >I element count
        >f8 each element (big-endian IEEE-754 double)
"""

import logging
import math
import numbers
import struct
from collections.abc import Iterable, Sequence

import numpy as np

from clave.errors import ValidationError

__all__ = [
    "Matrix",
    "canonicalize",
    "shape",
    "validate_matrix",
]

Matrix = Sequence[Sequence[float]]

_SHAPE_ERROR = "matrix must be a sequence of number sequences"


def _check_row(row) -> tuple[float, ...]:
    if isinstance(row, (str, bytes, bytearray)) or not isinstance(row, Iterable):
        raise ValidationError(_SHAPE_ERROR)
    values = []
    for value in row:
        # bool is an int subclass but never a meaningful coordinate
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
            raise ValidationError("matrix values must be finite numbers")
        try:
            value = float(value)
        except OverflowError:
            raise ValidationError("matrix values must be finite numbers") from None
        if not math.isfinite(value):
            raise ValidationError("matrix values must be finite numbers")
        values.append(value)
    return tuple(values)


def validate_matrix(matrix) -> tuple[tuple[float, ...], ...]:
    """Validate a matrix once and return an immutable copy of its rows.

    Accepts nested sequences (rows may be ragged) and numpy arrays. Rejects
    strings, non-iterable rows, booleans, non-real and non-finite values.
    """
    if isinstance(matrix, np.ndarray):
        if matrix.ndim != 2:
            raise ValidationError(_SHAPE_ERROR)
    elif isinstance(matrix, (str, bytes, bytearray)) or not isinstance(matrix, Iterable):
        raise ValidationError(_SHAPE_ERROR)
    return tuple(_check_row(row) for row in matrix)


def shape(rows: Sequence[Sequence[float]]) -> tuple[int, ...]:
    """Row lengths of a validated matrix, for logging."""
    return tuple(len(row) for row in rows)


def canonicalize(matrix) -> bytes:
    """Encode a matrix into its canonical byte string."""
    rows = validate_matrix(matrix)
    parts = [struct.pack(">I", len(rows))]
    for row in rows:
        parts.append(struct.pack(">I", len(row)))
        parts.append(np.asarray(row, dtype=">f8").tobytes())
    data = b"".join(parts)
    logging.debug("Canonicalized matrix rows=%s (%d bytes)", shape(rows), len(data))
    return data
