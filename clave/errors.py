"""Exception types raised by the derivation engine."""

__all__ = [
    "ClaveError",
    "GenerationExhausted",
    "RangeError",
    "ValidationError",
]


class ClaveError(ValueError):
    """Base class for all input and derivation errors."""


class ValidationError(ClaveError, TypeError):
    """The matrix is not a sequence of sequences of finite real numbers."""


class RangeError(ClaveError):
    """A parameter is outside its allowed bounds."""


class GenerationExhausted(ClaveError):
    """No password candidate met the complexity policy within the retry ceiling."""

    def __init__(self, attempts: int):
        super().__init__(
            f"failed to generate a password meeting complexity rules after {attempts} attempts"
        )
        self.attempts = attempts
