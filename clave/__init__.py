"""Clave - Deterministic secrets from matrices of numbers.

This package derives passwords, Ed25519 key pairs, signatures and raw key
material from a matrix of floating-point numbers. The same matrix, salt and
info always reproduce the same outputs.
"""

from clave.crypto import expand_matrix_bytes, hash_matrix, hash_matrix_hex
from clave.errors import ClaveError, GenerationExhausted, RangeError, ValidationError
from clave.keys import Passkey, Signature, create_passkey, sign_message, verify_message_signature
from clave.matrix import canonicalize
from clave.password import DEFAULT_ALPHABET, create_password
from clave.shared import create_shared_passkey, create_shared_signature, verify_shared_signatures

try:
    from clave._version import __version__
except ImportError:
    __version__ = "0.0.0.dev0"

__all__ = [
    "DEFAULT_ALPHABET",
    "ClaveError",
    "GenerationExhausted",
    "Passkey",
    "RangeError",
    "Signature",
    "ValidationError",
    "__version__",
    "canonicalize",
    "create_passkey",
    "create_password",
    "create_shared_passkey",
    "create_shared_signature",
    "expand_matrix_bytes",
    "hash_matrix",
    "hash_matrix_hex",
    "sign_message",
    "verify_message_signature",
    "verify_shared_signatures",
]
