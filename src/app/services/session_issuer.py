from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from libs.result import Result
from src.domain.base import CamelModel


class SessionUser(CamelModel):
    """User view embedded in an issued session"""

    id: str
    email: str
    phone: str
    name: Optional[str] = None
    login_token: Optional[str] = None
    login_record_id: Optional[str] = None


class IssuedSession(CamelModel):
    access_token: str
    expires_at: datetime
    user: SessionUser


class ISessionIssuer(ABC):
    """Session layer: turns verified credentials into a session"""

    @abstractmethod
    async def issue_session(
        self,
        identifier: str,
        password: str,
        login_token: str,
        login_record_id: UUID,
    ) -> Result[IssuedSession]:
        """Issue a session carrying the correlation token and login record id"""
        pass
