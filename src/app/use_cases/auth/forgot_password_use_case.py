"""
Forgot Password Use Case

Emails a set-password link to the account matching an email or phone.
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

GENERIC_MESSAGE = "If an account exists, a password reset link has been sent"


class ForgotPasswordUseCase:
    """
    Use case for requesting a password reset link.

    Business Rules:
    - Identifier must look like an email or a phone number (INVALID_IDENTIFIER)
    - Unknown identifiers get the same success response (no enumeration)
    - The link always goes to the account's email, even for phone lookups
    - Uses the same single-use, one-hour credential tokens as registration
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

    async def execute(self, identifier: str) -> Result[OkResponse]:
        """
        Errors:
            - INVALID_IDENTIFIER: neither an email nor a phone number
        """
        async with self.uow:
            lookup = await AccountRegistry(self.uow).find_by_identifier(identifier)
            if lookup.is_err():
                return Return.err(lookup.error)

            account = lookup.value
            if account is None:
                logger.info("Password reset requested for unknown identifier")
                return Return.ok(OkResponse(message=GENERIC_MESSAGE))

            tokens = CredentialTokenService(self.uow, self.token_ttl)
            if self.revoke_superseded:
                await tokens.revoke_outstanding(account.id)
            issued = await tokens.issue(account.id)
            await self.uow.commit()

            subject, html = password_setup_email(
                self.app_name,
                set_password_link(self.app_url, issued.raw_token),
                user_name=account.name,
                expires_in=describe_ttl(self.token_ttl),
                reason="reset",
            )
            recipient = account.email

        self.notifier.notify(recipient, subject, html)
        return Return.ok(OkResponse(message=GENERIC_MESSAGE))
