"""
Resend Registration Use Case

Issues a fresh set-password link for an account that registered but never
set a password.
"""

import logging
from datetime import timedelta

from libs.result import Result, Return
from src.app.services.account_registry import AccountRegistry
from src.app.services.credential_token_service import CredentialTokenService
from src.app.services.email_templates import (
    describe_ttl,
    password_setup_email,
    set_password_link,
)
from src.app.services.notifier import BestEffortNotifier
from src.app.services.unit_of_work import UnitOfWork
from .dtos import OkResponse

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "If the email exists, a set-password link has been sent"


class ResendRegistrationUseCase:
    """
    Use case for resending the registration set-password link.

    Business Rules:
    - Returns the same response for known and unknown emails (no enumeration)
    - Issues a new token for a known account
    - When revoke_superseded is set, older unused tokens of the account are
      retired first so only the newest link works
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: BestEffortNotifier,
        app_url: str,
        app_name: str,
        token_ttl: timedelta = timedelta(hours=1),
        revoke_superseded: bool = True,
    ):
        self.uow = uow
        self.notifier = notifier
        self.app_url = app_url
        self.app_name = app_name
        self.token_ttl = token_ttl
        self.revoke_superseded = revoke_superseded

    async def execute(self, email: str) -> Result[OkResponse]:
        async with self.uow:
            account = await AccountRegistry(self.uow).find_by_email(email)

            if account is None:
                logger.info("Resend requested for unknown email")
                return Return.ok(OkResponse(message=GENERIC_MESSAGE))

            tokens = CredentialTokenService(self.uow, self.token_ttl)
            if self.revoke_superseded:
                await tokens.revoke_outstanding(account.id)
            issued = await tokens.issue(account.id)
            await self.uow.commit()

            subject, html = password_setup_email(
                self.app_name,
                set_password_link(self.app_url, issued.raw_token),
                expires_in=describe_ttl(self.token_ttl),
                reason="resend",
            )
            recipient = account.email

        self.notifier.notify(recipient, subject, html)
        return Return.ok(OkResponse(message=GENERIC_MESSAGE))
