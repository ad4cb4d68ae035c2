"""Domain-separated seed derivation and counter-mode byte expansion."""

import hashlib
import logging
import struct
from collections.abc import Iterator

from clave.errors import RangeError
from clave.matrix import canonicalize
from clave.utils import to_bytes

__all__ = [
    "DOMAIN_TAG",
    "PURPOSE_HASH",
    "PURPOSE_PASSKEY",
    "PURPOSE_PASSWORD",
    "PURPOSE_SHARED_PASSKEY",
    "PURPOSE_SHARED_SIGNATURE",
    "PURPOSE_SIGNATURE",
    "SEED_BYTES",
    "derive_seed",
    "derive_shared_seed",
    "expand",
    "expand_matrix_bytes",
    "hash_matrix",
    "hash_matrix_hex",
    "iter_blocks",
]

DOMAIN_TAG = b"clave:deterministic:v1"

PURPOSE_PASSWORD = b"password"
PURPOSE_PASSKEY = b"passkey"
PURPOSE_SHARED_PASSKEY = b"shared-passkey"
PURPOSE_SIGNATURE = b"signature"
PURPOSE_SHARED_SIGNATURE = b"shared-signature"
PURPOSE_HASH = b"hash"

SEED_BYTES = hashlib.sha256().digest_size

# Counter is packed as >I
_MAX_COUNTER = 2**32


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _digest(purpose: bytes, binding: bytes, salt, info, matrix) -> bytes:
    # Canonicalize first so a malformed matrix fails before anything is hashed
    data = canonicalize(matrix)
    h = hashlib.sha256(DOMAIN_TAG)
    h.update(purpose)
    h.update(binding)
    h.update(to_bytes(salt, "salt"))
    h.update(to_bytes(info, "info"))
    h.update(data)
    return h.digest()


def derive_seed(matrix, purpose: bytes, salt=None, info=None) -> bytes:
    """Derive the 32-byte seed of a matrix for one purpose and context.

    The hash input is ``DOMAIN_TAG || purpose || salt || info || canonical``,
    in exactly that order.
    """
    logging.debug("Deriving %s seed", purpose.decode(errors="replace"))
    return _digest(purpose, b"", salt, info, matrix)


def derive_shared_seed(
    matrix, index: int, total: int, purpose: bytes, salt=None, info=None
) -> bytes:
    """Derive the seed of one member of a group of ``total`` matrices.

    Like :func:`derive_seed` with ``>I index || >I total`` bound in right
    after the purpose tag, so the same matrix at another position or in a
    group of another size yields an unrelated seed.
    """
    if not _is_int(index) or not _is_int(total):
        raise RangeError("shared index and total must be integers")
    if total <= 1:
        raise RangeError("shared derivation requires a total of at least 2")
    if not 0 <= index < total:
        raise RangeError(f"shared index must be between 0 and {total - 1}")
    if total >= _MAX_COUNTER:
        raise RangeError("shared total is too large")
    logging.debug("Deriving %s seed %d/%d", purpose.decode(errors="replace"), index, total)
    return _digest(purpose, struct.pack(">II", index, total), salt, info, matrix)


def iter_blocks(seed: bytes, start: int = 0) -> Iterator[bytes]:
    """Yield ``sha256(seed || >I counter)`` for counter = start, start + 1, ..."""
    for counter in range(start, _MAX_COUNTER):
        yield hashlib.sha256(seed + struct.pack(">I", counter)).digest()


def expand(seed: bytes, length: int) -> bytes:
    """Stretch a seed into exactly ``length`` pseudorandom bytes."""
    if not _is_int(length) or length < 0:
        raise RangeError("length must be a non-negative integer")
    if length > _MAX_COUNTER * SEED_BYTES:
        raise RangeError("length exceeds the counter-mode output limit")
    out = bytearray()
    blocks = iter_blocks(bytes(seed))
    while len(out) < length:
        out += next(blocks)
    del out[length:]
    return bytes(out)


def hash_matrix(matrix, salt=None, info=None) -> bytes:
    """Hash-purpose seed of a matrix, for arbitrary downstream use."""
    return derive_seed(matrix, PURPOSE_HASH, salt, info)


def hash_matrix_hex(matrix, salt=None, info=None) -> str:
    return hash_matrix(matrix, salt, info).hex()


def expand_matrix_bytes(matrix, length: int, salt=None, info=None) -> bytes:
    """Arbitrary-length deterministic key material derived from a matrix."""
    if not _is_int(length) or length <= 0:
        raise RangeError("length must be a positive integer")
    if length > _MAX_COUNTER * SEED_BYTES:
        raise RangeError("length exceeds the counter-mode output limit")
    return expand(hash_matrix(matrix, salt, info), length)
