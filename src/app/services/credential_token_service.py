"""
Credential Token Service

Issues, validates and consumes the single-use tokens that let an account
holder set a password.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import CredentialToken

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32  # 256 bits
DEFAULT_TOKEN_TTL = timedelta(hours=1)

INVALID_TOKEN = Error("INVALID_TOKEN", "Invalid or expired token")


def hash_token(raw_token: str) -> str:
    """SHA-256 hex digest of a raw token"""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class IssuedToken:
    """Raw token for the outbound link plus the stored row; the raw value is never persisted"""

    raw_token: str
    expires_at: datetime
    token: CredentialToken


class CredentialTokenService:
    """
    Business Rules:
    - Raw token: 256 bits from `secrets`, hex encoded
    - Only SHA-256(raw token) is stored
    - Valid only while used=False and expires_at > now
    - Every failure is the same INVALID_TOKEN error (no oracle for
      "unknown" vs "expired" vs "already used")
    - Consumption is a conditional update, so at most one redemption wins
    """

    def __init__(self, uow: UnitOfWork, ttl: timedelta = DEFAULT_TOKEN_TTL):
        self.uow = uow
        self.ttl = ttl

    async def issue(self, account_id: str) -> IssuedToken:
        raw_token = secrets.token_hex(TOKEN_BYTES)
        now = utcnow()
        token = CredentialToken(
            account_id=account_id,
            token_hash=hash_token(raw_token),
            used=False,
            expires_at=now + self.ttl,
            created_at=now,
        )
        token = await self.uow.credential_tokens.create(token)
        logger.info("Issued credential token %s for account %s", token.id, account_id)
        return IssuedToken(raw_token=raw_token, expires_at=token.expires_at, token=token)

    async def validate(self, raw_token: str) -> Result[CredentialToken]:
        if not raw_token:
            return Return.err(INVALID_TOKEN)

        token = await self.uow.credential_tokens.get_redeemable_by_hash(
            hash_token(raw_token), utcnow()
        )
        if token is None:
            return Return.err(INVALID_TOKEN)

        return Return.ok(token)

    async def consume(self, token_id: UUID) -> bool:
        """Mark the token used; False when another request already consumed it"""
        consumed = await self.uow.credential_tokens.mark_used(token_id)
        if not consumed:
            logger.warning("Credential token %s was already consumed", token_id)
        return consumed

    async def revoke_outstanding(self, account_id: str) -> int:
        """Retire every unused token of the account before a new one is issued"""
        revoked = await self.uow.credential_tokens.mark_all_used_for_account(account_id)
        if revoked:
            logger.info("Revoked %d outstanding credential tokens for account %s", revoked, account_id)
        return revoked
