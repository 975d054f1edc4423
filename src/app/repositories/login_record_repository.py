from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import LoginRecord


class ILoginRecordRepository(ABC):
    """LoginRecord repository interface - application layer"""

    @abstractmethod
    async def create(self, record: LoginRecord) -> LoginRecord:
        """Create a new login record"""
        pass

    @abstractmethod
    async def get_by_id(self, record_id: UUID) -> Optional[LoginRecord]:
        """Get login record by ID"""
        pass

    @abstractmethod
    async def mark_logged_out(self, record_id: UUID, logged_out_at: datetime) -> bool:
        """Stamp logged_out_at if not already set; True if this call stamped it"""
        pass
