import pytest

from src.app.services.passwords import hash_password, validate_password, verify_password


@pytest.mark.parametrize(
    "password",
    ["Sh0rt!", "alllowercase1!", "NoDigitsHere!", "NoSpecial123", "A1!" + "x" * 70],
)
def test_validate_password_rejects(password):
    result = validate_password(password)

    assert result.is_err()
    assert result.error.code == "INVALID_PASSWORD"


def test_validate_password_accepts():
    assert validate_password("SecurePass123!").is_ok()


def test_hash_and_verify():
    password_hash = hash_password("SecurePass123!")

    assert password_hash.startswith("$2b$12$")
    assert verify_password("SecurePass123!", password_hash) is True
    assert verify_password("WrongPass123!", password_hash) is False


def test_verify_password_with_malformed_hash():
    assert verify_password("SecurePass123!", "not-a-bcrypt-hash") is False
