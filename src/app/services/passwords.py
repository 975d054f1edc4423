import re

import bcrypt

from libs.result import Error, Result, Return

BCRYPT_COST = 12
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt ignores anything beyond 72 bytes

_SPECIAL = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


def validate_password(password: str) -> Result[None]:
    """Fixed password rules: length, an uppercase letter, a digit and a special character."""
    if len(password) < PASSWORD_MIN_LENGTH:
        return Return.err(
            Error("INVALID_PASSWORD", f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        )
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return Return.err(
            Error("INVALID_PASSWORD", f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
        )
    if not re.search(r"[A-Z]", password):
        return Return.err(
            Error("INVALID_PASSWORD", "Password must contain at least one uppercase letter")
        )
    if not re.search(r"[0-9]", password):
        return Return.err(
            Error("INVALID_PASSWORD", "Password must contain at least one number")
        )
    if not _SPECIAL.search(password):
        return Return.err(
            Error("INVALID_PASSWORD", "Password must contain at least one special character")
        )
    return Return.ok(None)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(BCRYPT_COST)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long candidate
        return False


def burn_password_check() -> None:
    """Spend one bcrypt round on a dummy value so misses cost the same as hits"""
    bcrypt.checkpw(b"dummy_password", bcrypt.gensalt(BCRYPT_COST))
