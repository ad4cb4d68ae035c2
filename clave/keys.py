"""Ed25519 key pairs and signatures derived from matrices."""

import logging
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from clave.crypto import PURPOSE_PASSKEY, PURPOSE_SIGNATURE, derive_seed
from clave.utils import to_bytes

__all__ = [
    "CURVE",
    "Passkey",
    "Signature",
    "create_passkey",
    "keypair_from_seed",
    "sign_message",
    "sign_with_seed",
    "verify_message_signature",
]

CURVE = "ed25519"
PRIVATE_KEY_BYTES = 32
PUBLIC_KEY_BYTES = 32
SIGNATURE_BYTES = 64


@dataclass(frozen=True)
class Passkey:
    """A deterministic Ed25519 key pair. The private key is the raw 32-byte seed."""

    private_key: bytes
    public_key: bytes
    curve: str = CURVE

    @property
    def private_key_hex(self) -> str:
        return self.private_key.hex()

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()

    def __repr__(self) -> str:
        return f"Passkey(curve={self.curve!r}, public_key={self.public_key_hex!r})"


@dataclass(frozen=True)
class Signature:
    """An Ed25519 signature together with the public key that verifies it."""

    signature: bytes
    public_key: bytes
    curve: str = CURVE

    @property
    def signature_hex(self) -> str:
        return self.signature.hex()

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()

    def verify(self, message: str | bytes) -> bool:
        return verify_message_signature(message, self.signature, self.public_key)


def _message_bytes(message: str | bytes) -> bytes:
    if message is None:
        raise TypeError("message must be str or bytes, not None")
    return to_bytes(message, "message")


def _public_bytes(private: Ed25519PrivateKey) -> bytes:
    return private.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def _private_key(seed: bytes) -> Ed25519PrivateKey:
    if len(seed) != PRIVATE_KEY_BYTES:
        raise ValueError(f"Ed25519 private key must be {PRIVATE_KEY_BYTES} bytes")
    return Ed25519PrivateKey.from_private_bytes(bytes(seed))


def keypair_from_seed(seed: bytes) -> Passkey:
    """Treat a 32-byte seed as an Ed25519 private key and compute its public key."""
    return Passkey(bytes(seed), _public_bytes(_private_key(seed)))


def sign_with_seed(seed: bytes, message: str | bytes) -> Signature:
    """Sign a message (text is UTF-8 encoded) with the key held by a seed."""
    private = _private_key(seed)
    signature = private.sign(_message_bytes(message))
    return Signature(signature, _public_bytes(private))


def create_passkey(matrix, salt=None, info=None) -> Passkey:
    """Derive the Ed25519 key pair of a matrix."""
    return keypair_from_seed(derive_seed(matrix, PURPOSE_PASSKEY, salt, info))


def sign_message(matrix, message: str | bytes, salt=None, info=None) -> Signature:
    """Sign a message with the signature-purpose key of a matrix."""
    return sign_with_seed(derive_seed(matrix, PURPOSE_SIGNATURE, salt, info), message)


def _raw(value: str | bytes) -> bytes | None:
    """Bytes of a key or signature given raw or as hex; None if undecodable."""
    if isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError:
            return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return None


def verify_message_signature(
    message: str | bytes, signature: str | bytes, public_key: str | bytes
) -> bool:
    """Check an Ed25519 signature over a message.

    Signature and public key may be raw bytes or hex strings. A mismatch,
    a wrong length or an undecodable value all give False.
    """
    data = _message_bytes(message)
    sig = _raw(signature)
    key = _raw(public_key)
    if sig is None or key is None:
        return False
    if len(sig) != SIGNATURE_BYTES or len(key) != PUBLIC_KEY_BYTES:
        logging.debug("Rejecting signature with malformed lengths")
        return False
    try:
        Ed25519PublicKey.from_public_bytes(key).verify(sig, data)
    except (InvalidSignature, ValueError):
        return False
    return True
