"""
Sign Out Use Case

Closes the login record that belongs to a session.
"""

import logging
from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import OkResponse

logger = logging.getLogger(__name__)


class SignOutUseCase:
    """
    Business Rules:
    - Idempotent: only the first sign-out stamps logged_out_at
    - logged_out_at is never earlier than logged_in_at
    - A missing record is logged, sign-out still succeeds
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, login_record_id: UUID) -> Result[OkResponse]:
        async with self.uow:
            record = await self.uow.login_records.get_by_id(login_record_id)
            if record is None:
                logger.warning("Sign-out for unknown login record %s", login_record_id)
                return Return.ok(OkResponse(message="Signed out"))

            if record.logged_out_at is None:
                logged_out_at = max(utcnow(), record.logged_in_at)
                stamped = await self.uow.login_records.mark_logged_out(
                    record.id, logged_out_at
                )
                await self.uow.commit()
                if stamped:
                    logger.info("Login record %s closed", login_record_id)

        return Return.ok(OkResponse(message="Signed out"))
