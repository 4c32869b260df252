import pytest

from src.app.services.passwords import (
    MAX_PASSWORD_BYTES,
    burn_password_check,
    hash_password,
    verify_password,
)
from src.app.use_cases.auth import validate_password

LONG_PASSWORD = "p" * 100


def test_hash_and_verify():
    password_hash = hash_password("SecurePass123!")

    assert verify_password("SecurePass123!", password_hash)
    assert not verify_password("SecurePass124!", password_hash)


def test_verify_over_long_password_is_a_mismatch():
    password_hash = hash_password("p" * MAX_PASSWORD_BYTES)

    assert verify_password(LONG_PASSWORD, password_hash) is False


def test_verify_malformed_hash():
    assert verify_password("SecurePass123!", "not-a-bcrypt-hash") is False


def test_burn_check_accepts_over_long_password():
    assert burn_password_check(LONG_PASSWORD) is None


def test_hash_refuses_over_long_password():
    with pytest.raises(ValueError):
        hash_password(LONG_PASSWORD)


@pytest.mark.parametrize(
    "password",
    ["short", LONG_PASSWORD, "é" * 40],
)
def test_policy_rejects(password):
    result = validate_password(password)

    assert result.is_err()
    assert result.error.code == "INVALID_PASSWORD"


def test_policy_accepts_72_bytes():
    assert validate_password("p" * MAX_PASSWORD_BYTES).is_ok()
