"""Deterministic password synthesis with rejection sampling.

Each attempt draws characters from the counter-mode stream of the password
seed, starting at a counter equal to the attempt number. Bytes at or above
the largest multiple of the alphabet size are rejected so that every
character is equally likely. The first candidate containing a lowercase
letter, an uppercase letter, a digit and a symbol is returned.
"""

import enum
import logging
from dataclasses import dataclass

from clave.crypto import PURPOSE_PASSWORD, derive_seed, iter_blocks
from clave.errors import GenerationExhausted, RangeError

__all__ = [
    "DEFAULT_ALPHABET",
    "DEFAULT_LENGTH",
    "MAX_ATTEMPTS",
    "CharClass",
    "PasswordPolicy",
    "classify",
    "create_password",
    "synthesize_password",
]

DEFAULT_ALPHABET = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!@#$%^&*()-_=+[]{};:,.?/"
)
DEFAULT_LENGTH = 16
MIN_LENGTH = 8
MAX_LENGTH = 16
MIN_ALPHABET = 2
MAX_ALPHABET = 256
MAX_ATTEMPTS = 1000


class CharClass(enum.IntFlag):
    LOWER = 1
    UPPER = 2
    DIGIT = 4
    SYMBOL = 8


ALL_CLASSES = CharClass.LOWER | CharClass.UPPER | CharClass.DIGIT | CharClass.SYMBOL


def classify(char: str) -> CharClass:
    """Character class of a single character (ASCII letters and digits only)."""
    if "a" <= char <= "z":
        return CharClass.LOWER
    if "A" <= char <= "Z":
        return CharClass.UPPER
    if "0" <= char <= "9":
        return CharClass.DIGIT
    return CharClass.SYMBOL


@dataclass(frozen=True)
class PasswordPolicy:
    """A validated length/alphabet pair with its character class table."""

    length: int
    alphabet: str
    classes: tuple[CharClass, ...]

    @classmethod
    def create(cls, length: int = DEFAULT_LENGTH, alphabet: str = DEFAULT_ALPHABET):
        if isinstance(length, bool) or not isinstance(length, int):
            raise RangeError(f"password length must be between {MIN_LENGTH} and {MAX_LENGTH}")
        if not MIN_LENGTH <= length <= MAX_LENGTH:
            raise RangeError(f"password length must be between {MIN_LENGTH} and {MAX_LENGTH}")
        if not isinstance(alphabet, str):
            raise RangeError("alphabet must be a string")
        if not MIN_ALPHABET <= len(alphabet) <= MAX_ALPHABET:
            raise RangeError(
                f"alphabet length must be between {MIN_ALPHABET} and {MAX_ALPHABET}"
            )
        if len(set(alphabet)) != len(alphabet):
            raise RangeError("alphabet characters must be distinct")
        classes = tuple(classify(c) for c in alphabet)
        covered = CharClass(0)
        for c in classes:
            covered |= c
        if covered != ALL_CLASSES:
            raise RangeError(
                "alphabet must include lowercase, uppercase, numeric, and symbol characters"
            )
        return cls(length, alphabet, classes)

    @property
    def limit(self) -> int:
        """Bytes at or above this value are rejected to avoid modulo bias."""
        n = len(self.alphabet)
        return 256 // n * n

    def satisfied_by(self, indexes: list[int]) -> bool:
        """Whether the characters at these alphabet indexes cover every class."""
        covered = CharClass(0)
        for i in indexes:
            covered |= self.classes[i]
        return covered == ALL_CLASSES

    def candidate(self, seed: bytes, attempt: int) -> list[int]:
        """Alphabet indexes of the candidate drawn for one attempt."""
        n = len(self.alphabet)
        limit = self.limit
        out: list[int] = []
        for block in iter_blocks(seed, attempt):
            for byte in block:
                if byte >= limit:
                    continue
                out.append(byte % n)
                if len(out) == self.length:
                    return out
        raise GenerationExhausted(attempt + 1)


def synthesize_password(matrix, length: int, alphabet: str, salt=None, info=None) -> str:
    """Derive the password of a matrix under an explicit length/alphabet policy."""
    policy = PasswordPolicy.create(length, alphabet)
    seed = derive_seed(matrix, PURPOSE_PASSWORD, salt, info)
    for attempt in range(MAX_ATTEMPTS):
        indexes = policy.candidate(seed, attempt)
        if policy.satisfied_by(indexes):
            logging.debug("Password accepted on attempt %d", attempt)
            return "".join(alphabet[i] for i in indexes)
    raise GenerationExhausted(MAX_ATTEMPTS)


def create_password(
    matrix,
    length: int = DEFAULT_LENGTH,
    alphabet: str = DEFAULT_ALPHABET,
    salt=None,
    info=None,
) -> str:
    """Derive a password from a matrix.

    Raises ValidationError for a malformed matrix, RangeError for a bad
    length or alphabet and GenerationExhausted when no candidate within
    MAX_ATTEMPTS satisfies the complexity policy.
    """
    return synthesize_password(matrix, length, alphabet, salt, info)
