from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.credential_token_repository import ICredentialTokenRepository
from src.domain.entities import CredentialToken


class CredentialTokenRepository(ICredentialTokenRepository):
    """CredentialToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: CredentialToken) -> CredentialToken:
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_redeemable_by_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[CredentialToken]:
        stmt = select(CredentialToken).where(
            CredentialToken.token_hash == token_hash,
            CredentialToken.used == False,  # noqa: E712
            CredentialToken.expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def mark_used(self, token_id: UUID) -> bool:
        """
        Conditional update: only the caller that flips used from False to True
        sees a row count of one, so concurrent redemptions cannot both succeed.
        """
        stmt = (
            update(CredentialToken)
            .where(CredentialToken.id == token_id, CredentialToken.used == False)  # noqa: E712
            .values(used=True)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def mark_all_used_for_account(self, account_id: str) -> int:
        stmt = (
            update(CredentialToken)
            .where(
                CredentialToken.account_id == account_id,
                CredentialToken.used == False,  # noqa: E712
            )
            .values(used=True)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
