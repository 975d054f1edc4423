from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import CredentialToken


class ICredentialTokenRepository(ABC):
    """CredentialToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: CredentialToken) -> CredentialToken:
        """Create a new credential token"""
        pass

    @abstractmethod
    async def get_redeemable_by_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[CredentialToken]:
        """Get an unused, unexpired token by its hash"""
        pass

    @abstractmethod
    async def mark_used(self, token_id: UUID) -> bool:
        """Set used=True only if the token is still unused; True if this call flipped it"""
        pass

    @abstractmethod
    async def mark_all_used_for_account(self, account_id: str) -> int:
        """Mark every unused token of an account as used, returning the count"""
        pass
