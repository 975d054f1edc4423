from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import Account


class IAccountRepository(ABC):
    """Account repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, account_id: str) -> Optional[Account]:
        """Get account by external ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Account]:
        """Get account by email address"""
        pass

    @abstractmethod
    async def get_by_phone(self, phone: str) -> Optional[Account]:
        """Get account by phone number"""
        pass

    @abstractmethod
    async def exists_by_id(self, account_id: str) -> bool:
        """Check whether an external ID is already taken"""
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Create a new account"""
        pass

    @abstractmethod
    async def update(self, account: Account) -> Account:
        """Update existing account"""
        pass
