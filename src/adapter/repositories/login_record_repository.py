from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.login_record_repository import ILoginRecordRepository
from src.domain.entities import LoginRecord


class LoginRecordRepository(ILoginRecordRepository):
    """LoginRecord repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: LoginRecord) -> LoginRecord:
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def get_by_id(self, record_id: UUID) -> Optional[LoginRecord]:
        stmt = select(LoginRecord).where(LoginRecord.id == record_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def mark_logged_out(self, record_id: UUID, logged_out_at: datetime) -> bool:
        stmt = (
            update(LoginRecord)
            .where(LoginRecord.id == record_id, LoginRecord.logged_out_at.is_(None))
            .values(logged_out_at=logged_out_at)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1
