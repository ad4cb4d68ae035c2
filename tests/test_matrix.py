import math
import struct

import numpy as np
import pytest

from clave.errors import ValidationError
from clave.matrix import canonicalize, validate_matrix

BASE = [[2, 2.3, 4], [7, 7.8, 7], [4.442, 3, 9]]


def test_canonical_layout():
    """Row count, per-row length prefixes and big-endian doubles"""
    expected = (
        "00000003"
        "00000003" "4000000000000000" "4002666666666666" "4010000000000000"
        "00000003" "401c000000000000" "401f333333333333" "401c000000000000"
        "00000003" "4011c49ba5e353f8" "4008000000000000" "4022000000000000"
    )
    assert canonicalize(BASE).hex() == expected


def test_matches_struct_encoding():
    matrix = [[0.22, 1.08], [37.7749, -122.4194], [1.57, -0.42, 0.05], [-33.8688, 151.2093]]
    expected = struct.pack(">I", len(matrix))
    for row in matrix:
        expected += struct.pack(f">I{len(row)}d", len(row), *row)
    assert canonicalize(matrix) == expected


def test_empty_forms():
    assert canonicalize([]) == bytes(4)
    assert canonicalize([[]]) == b"\x00\x00\x00\x01" + bytes(4)
    assert canonicalize([[], []]) == b"\x00\x00\x00\x02" + bytes(8)


def test_ragged_rows_do_not_collide():
    """Same flattened values, different row boundaries"""
    encodings = {
        canonicalize([[1, 2, 3], [4]]),
        canonicalize([[1, 2], [3, 4]]),
        canonicalize([[1], [2, 3, 4]]),
        canonicalize([[1, 2, 3, 4]]),
        canonicalize([[1, 2, 3, 4], []]),
    }
    assert len(encodings) == 5


def test_order_is_significant():
    assert canonicalize(BASE) != canonicalize(BASE[::-1])
    transposed = [list(col) for col in zip(*BASE)]
    assert canonicalize(BASE) != canonicalize(transposed)
    assert canonicalize([[1.0, 2.0]]) != canonicalize([[2.0, 1.0]])


def test_single_scalar_change():
    nudged = [row[:] for row in BASE]
    nudged[1][1] = math.nextafter(7.8, math.inf)
    assert canonicalize(BASE) != canonicalize(nudged)


def test_negative_zero_is_distinct():
    assert canonicalize([[0.0]]) != canonicalize([[-0.0]])


def test_ints_and_floats_encode_alike():
    assert canonicalize([[1, 2]]) == canonicalize([[1.0, 2.0]])


def test_numpy_input():
    array = np.array([[2, 2.3, 4], [7, 7.8, 7], [4.442, 3, 9]])
    assert canonicalize(array) == canonicalize(BASE)
    assert canonicalize([np.array([1.5, 2.5]), (3,)]) == canonicalize([[1.5, 2.5], [3.0]])


def test_input_not_mutated():
    matrix = [[1, 2.5], [3]]
    canonicalize(matrix)
    assert matrix == [[1, 2.5], [3]]


def test_validate_returns_immutable_rows():
    assert validate_matrix([[1, 2], [3]]) == ((1.0, 2.0), (3.0,))


@pytest.mark.parametrize(
    "value",
    [math.nan, math.inf, -math.inf, np.nan, np.float64("inf"), 10**400, -(10**400)],
)
def test_non_finite_rejected(value):
    with pytest.raises(ValidationError):
        canonicalize([[1.0, value]])


@pytest.mark.parametrize(
    "matrix",
    [
        None,
        5,
        "1,2,3",
        b"\x00",
        [1, 2, 3],
        [[1, 2], 3],
        [["1", 2]],
        [[True, 2]],
        [[1 + 2j]],
        [[None]],
        ["abc"],
        np.array([1.0, 2.0]),
    ],
)
def test_malformed_rejected(matrix):
    with pytest.raises(ValidationError):
        canonicalize(matrix)


def test_validation_error_is_value_and_type_error():
    with pytest.raises(ValueError):
        canonicalize([[math.nan]])
    with pytest.raises(TypeError):
        canonicalize([[math.nan]])
