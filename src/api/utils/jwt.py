from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_session_jwt(
    account_id: str,
    email: str,
    phone: str,
    name: Optional[str],
    login_token: str,
    login_record_id: UUID,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, datetime]:
    """
    Generate session JWT

    Args:
        account_id: Account external id (sub claim)
        email: Account email
        phone: Account phone
        name: Display name
        login_token: Correlation token of the login record
        login_record_id: LoginRecord UUID
        expires_delta: Session lifetime (defaults to SESSION_TTL_MINUTES)

    Returns:
        (JWT token string (HS256), expiry)
    """
    now = datetime.now(UTC)
    expires_at = now + (
        expires_delta or timedelta(minutes=ApplicationConfig.SESSION_TTL_MINUTES)
    )
    payload = {
        "sub": account_id,
        "email": email,
        "phone": phone,
        "name": name,
        "login_token": login_token,
        "login_record_id": str(login_record_id),
        "exp": expires_at,
        "iat": now,
    }
    token = jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")
    return token, expires_at


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
        return payload
    except JWTError:
        return None
