"""
Set Password Use Case

Redeems a credential token: stores the first (or a replacement) password and
marks the email verified.
"""

import logging
from typing import Optional

from libs.result import Result, Return
from src.app.services.account_registry import AccountRegistry
from src.app.services.credential_token_service import INVALID_TOKEN, CredentialTokenService
from src.app.services.email_templates import password_changed_email
from src.app.services.notifier import BestEffortNotifier
from src.app.services.passwords import hash_password, validate_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.device import DeviceInfo
from .dtos import OkResponse

logger = logging.getLogger(__name__)


class SetPasswordUseCase:
    """
    Use case for setting a password from an emailed link.

    Business Rules:
    - Password rules are checked before the token is looked at
    - Token must be unused and unexpired; every miss is INVALID_TOKEN
    - Token consumption and the account update commit together
    - Of two concurrent redemptions only one succeeds
    - The password-changed email is best effort and carries device details
    """

    def __init__(self, uow: UnitOfWork, notifier: BestEffortNotifier, app_name: str):
        self.uow = uow
        self.notifier = notifier
        self.app_name = app_name

    async def execute(
        self, token: str, password: str, device: Optional[DeviceInfo] = None
    ) -> Result[OkResponse]:
        """
        Execute set password use case.

        Args:
            token: Raw token from the set-password link
            password: New plain text password
            device: Merged device descriptor for the notification

        Returns:
            Result with OkResponse, or Error

        Errors:
            - INVALID_PASSWORD: password does not meet the rules
            - INVALID_TOKEN: unknown, expired or already used token
        """
        rules = validate_password(password)
        if rules.is_err():
            return Return.err(rules.error)

        async with self.uow:
            tokens = CredentialTokenService(self.uow)

            validation = await tokens.validate(token)
            if validation.is_err():
                return Return.err(validation.error)
            credential = validation.value

            registry = AccountRegistry(self.uow)
            account = await registry.find_by_id(credential.account_id)
            if account is None:
                logger.warning("Credential token %s has no account", credential.id)
                return Return.err(INVALID_TOKEN)

            password_hash = hash_password(password)

            if not await tokens.consume(credential.id):
                return Return.err(INVALID_TOKEN)

            await registry.mark_verified_with_password(account, password_hash)
            await self.uow.commit()

            recipient = account.email
            account_id = account.id

        logger.info("Password set for account %s", account_id)

        subject, html = password_changed_email(self.app_name, recipient, device)
        self.notifier.notify(recipient, subject, html)

        return Return.ok(OkResponse(message="Password set successfully"))
