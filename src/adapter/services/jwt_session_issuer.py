"""
In-process session layer.

Re-checks the credentials it is handed, then signs an HS256 session JWT that
carries the login correlation token and the login record id.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.api.utils.jwt import generate_session_jwt
from src.app.services.account_registry import AccountRegistry
from src.app.services.passwords import verify_password
from src.app.services.session_issuer import ISessionIssuer, IssuedSession, SessionUser
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class JwtSessionIssuer(ISessionIssuer):
    def __init__(self, uow: UnitOfWork, ttl: Optional[timedelta] = None):
        self.uow = uow
        self.ttl = ttl

    async def issue_session(
        self,
        identifier: str,
        password: str,
        login_token: str,
        login_record_id: UUID,
    ) -> Result[IssuedSession]:
        async with self.uow:
            lookup = await AccountRegistry(self.uow).find_by_identifier(identifier)
            account = lookup.value if lookup.is_ok() else None

            if (
                account is None
                or not account.has_password
                or not verify_password(password, account.password_hash)
            ):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid credentials")
                )

            if account.is_suspended or account.is_terminated:
                return Return.err(Error("ACCOUNT_BLOCKED", "Account is not active"))

            user = SessionUser(
                id=account.id,
                email=account.email,
                phone=account.phone,
                name=account.name,
                login_token=login_token,
                login_record_id=str(login_record_id),
            )

        access_token, expires_at = generate_session_jwt(
            account_id=user.id,
            email=user.email,
            phone=user.phone,
            name=user.name,
            login_token=login_token,
            login_record_id=login_record_id,
            expires_delta=self.ttl,
        )
        logger.info("Session issued for account %s", user.id)
        return Return.ok(
            IssuedSession(access_token=access_token, expires_at=expires_at, user=user)
        )


def session_user_from_claims(claims: dict) -> SessionUser:
    return SessionUser(
        id=claims["sub"],
        email=claims.get("email") or "",
        phone=claims.get("phone") or "",
        name=claims.get("name"),
        login_token=claims.get("login_token"),
        login_record_id=claims.get("login_record_id"),
    )
