import pytest

from clave import password as password_mod
from clave.crypto import PURPOSE_PASSWORD, derive_seed, hash_matrix
from clave.errors import GenerationExhausted, RangeError, ValidationError
from clave.password import (
    DEFAULT_ALPHABET,
    CharClass,
    PasswordPolicy,
    classify,
    create_password,
    synthesize_password,
)

BASE = [[2, 2.3, 4], [7, 7.8, 7], [4.442, 3, 9]]
ANGLES = [[0.12, 0.78, -0.35], [1.57, -0.42, 0.05], [2.09, 0.31, -1.2], [3.14, -0.85, 0.42]]


def has_all_classes(pw: str) -> bool:
    return (
        any(c.islower() and c.isascii() for c in pw)
        and any(c.isupper() and c.isascii() for c in pw)
        and any(c.isdigit() and c.isascii() for c in pw)
        and any(not c.isalnum() or not c.isascii() for c in pw)
    )


def test_known_answers():
    assert create_password(BASE) == "o5{?x!n_i=X^STJ2"
    assert create_password(BASE, length=16) == "o5{?x!n_i=X^STJ2"
    assert create_password(BASE, length=12) == "o5{?x!n_i=X^"


def test_known_answer_after_retries():
    """Length 8 needs attempt 5, which starts the stream at counter 5"""
    assert create_password(BASE, length=8) == "D4(LA7tz"


def test_small_alphabet_known_answer():
    assert create_password(BASE, length=8, alphabet="aA1!") == "1!AAAaAa"


def test_default_alphabet():
    assert len(DEFAULT_ALPHABET) == 86
    assert len(set(DEFAULT_ALPHABET)) == 86


@pytest.mark.parametrize("length", range(8, 17))
def test_policy_holds(length):
    for matrix in (BASE, ANGLES, [[1.0]], []):
        pw = create_password(matrix, length=length)
        assert len(pw) == length
        assert set(pw) <= set(DEFAULT_ALPHABET)
        assert has_all_classes(pw)


@pytest.mark.parametrize("alphabet", ["aA1!", "xyzXYZ789#$%", "qQ5~éß"])
def test_custom_alphabet_respected(alphabet):
    pw = create_password(ANGLES, length=16, alphabet=alphabet)
    assert len(pw) == 16
    assert set(pw) <= set(alphabet)
    assert has_all_classes(pw)


def test_determinism_and_context():
    assert create_password(ANGLES) == create_password(ANGLES)
    assert create_password(BASE, salt="salt") != create_password(BASE)
    assert create_password(BASE, info="site.example") != create_password(BASE)
    assert create_password(BASE, salt="a") != create_password(BASE, salt="b")


def test_password_seed_is_separate_from_hash():
    assert derive_seed(BASE, PURPOSE_PASSWORD) != hash_matrix(BASE)


@pytest.mark.parametrize("length", [0, 7, 17, 24, -1, 12.0, "16", None, True])
def test_bad_length(length):
    with pytest.raises(RangeError):
        create_password(BASE, length=length)


@pytest.mark.parametrize(
    "alphabet",
    [
        "",
        "a",
        "abcdefABCDEF0123",  # no symbol
        "abcdef0123!@#",  # no uppercase
        "ABCDEF0123!@#",  # no lowercase
        "abcABC!@#",  # no digit
        "aA1!!",  # repeated character
        "aA1!" + "".join(chr(0x100 + i) for i in range(253)),  # 257 characters
        b"aA1!",
    ],
)
def test_bad_alphabet(alphabet):
    with pytest.raises(RangeError):
        create_password(BASE, alphabet=alphabet)


def test_policy_checked_before_derivation(monkeypatch):
    def fail(*args):
        raise AssertionError("seed should not be derived")

    monkeypatch.setattr(password_mod, "derive_seed", fail)
    with pytest.raises(RangeError):
        create_password(BASE, length=17)


def test_invalid_matrix():
    with pytest.raises(ValidationError):
        create_password([[1, float("nan")]])


def test_exhaustion_on_hard_alphabet():
    """One lowercase, one uppercase and one digit among 256 characters"""
    alphabet = "aA0" + "".join(chr(0x100 + i) for i in range(253))
    assert len(alphabet) == 256
    with pytest.raises(GenerationExhausted) as info:
        synthesize_password(BASE, 8, alphabet)
    assert info.value.attempts == 1000


def test_exhaustion_with_lowered_ceiling(monkeypatch):
    monkeypatch.setattr(password_mod, "MAX_ATTEMPTS", 5)
    with pytest.raises(GenerationExhausted):
        create_password(BASE, length=8)
    monkeypatch.setattr(password_mod, "MAX_ATTEMPTS", 6)
    assert create_password(BASE, length=8) == "D4(LA7tz"


@pytest.mark.parametrize(
    "char, expected",
    [
        ("a", CharClass.LOWER),
        ("z", CharClass.LOWER),
        ("A", CharClass.UPPER),
        ("Z", CharClass.UPPER),
        ("0", CharClass.DIGIT),
        ("9", CharClass.DIGIT),
        ("!", CharClass.SYMBOL),
        (" ", CharClass.SYMBOL),
        ("é", CharClass.SYMBOL),
        ("١", CharClass.SYMBOL),
    ],
)
def test_classify(char, expected):
    assert classify(char) == expected


def test_policy_limit_rejects_biased_bytes():
    policy = PasswordPolicy.create(16, DEFAULT_ALPHABET)
    assert policy.limit == 172
    assert PasswordPolicy.create(8, "aA1!").limit == 256
    assert PasswordPolicy.create(8, "aA1!x").limit == 255


def test_candidate_skips_rejected_bytes():
    policy = PasswordPolicy.create(8, "aA1!x")
    seed = derive_seed(BASE, PURPOSE_PASSWORD)
    indexes = policy.candidate(seed, 0)
    assert len(indexes) == 8
    assert all(0 <= i < 5 for i in indexes)
