"""Key pairs and signatures for an ordered group of matrices.

Member ``i`` of a group of ``n`` matrices is derived with ``(i, n)`` bound
into its seed, so reordering the group or changing its size changes every
member's key.
"""

from collections.abc import Iterable, Sequence

from clave.crypto import PURPOSE_SHARED_PASSKEY, PURPOSE_SHARED_SIGNATURE, derive_shared_seed
from clave.errors import RangeError
from clave.keys import Passkey, Signature, keypair_from_seed, sign_with_seed

__all__ = [
    "create_shared_passkey",
    "create_shared_signature",
    "verify_shared_signatures",
]


def _group(matrices) -> list:
    if isinstance(matrices, (str, bytes)) or not isinstance(matrices, Iterable):
        raise RangeError("shared derivation requires a sequence of at least 2 matrices")
    group = list(matrices)
    if len(group) < 2:
        raise RangeError("shared derivation requires at least 2 matrices")
    return group


def create_shared_passkey(matrices, salt=None, info=None) -> list[Passkey]:
    """Derive one key pair per matrix, bound to its position in the group."""
    group = _group(matrices)
    total = len(group)
    return [
        keypair_from_seed(
            derive_shared_seed(matrix, index, total, PURPOSE_SHARED_PASSKEY, salt, info)
        )
        for index, matrix in enumerate(group)
    ]


def create_shared_signature(matrices, message: str | bytes, salt=None, info=None) -> list[Signature]:
    """Sign a message once per matrix, each with its position-bound key."""
    group = _group(matrices)
    total = len(group)
    return [
        sign_with_seed(
            derive_shared_seed(matrix, index, total, PURPOSE_SHARED_SIGNATURE, salt, info),
            message,
        )
        for index, matrix in enumerate(group)
    ]


def verify_shared_signatures(message: str | bytes, signatures: Sequence[Signature]) -> bool:
    """True only if every signature verifies against its own public key."""
    signatures = list(signatures)
    if not signatures:
        return False
    for s in signatures:
        if not isinstance(s, Signature):
            raise TypeError(f"signatures must be Signature objects, not {type(s).__name__}")
    return all(s.verify(message) for s in signatures)
