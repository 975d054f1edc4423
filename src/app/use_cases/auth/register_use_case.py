"""
Register Use Case

Creates a password-less account and emails a set-password link.
"""

import logging
from datetime import timedelta
from typing import Union

from libs.result import Error, Result, Return
from src.app.services.account_registry import AccountRegistry, normalize_email
from src.app.services.credential_token_service import CredentialTokenService
from src.app.services.email_templates import (
    describe_ttl,
    password_setup_email,
    set_password_link,
)
from src.app.services.mail_domain_validator import IMailDomainValidator
from src.app.services.notifier import BestEffortNotifier
from src.app.services.unit_of_work import UnitOfWork
from .dtos import EmailUnverifiedResponse
from .register_dto import AccountInfo, RegisterCommand, RegisterResponse

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand (validated business intent)
    - Output: Result[RegisterResponse | EmailUnverifiedResponse]

    Business Logic:
    1. Validate kind-specific fields (no side effects on failure)
    2. Phone uniqueness, strictly before email uniqueness (PHONE_IN_USE)
    3. Email uniqueness: verified -> EMAIL_EXISTS, unverified -> EMAIL_UNVERIFIED (not an error)
    4. MX lookup for the email domain, outside any open transaction
    5. Create and commit the account (no password, unverified)
    6. Issue and commit a credential token
    7. Best-effort email with the set-password link
    """

    def __init__(
        self,
        uow: UnitOfWork,
        mail_domains: IMailDomainValidator,
        notifier: BestEffortNotifier,
        app_url: str,
        app_name: str,
        token_ttl: timedelta = timedelta(hours=1),
    ):
        self.uow = uow
        self.mail_domains = mail_domains
        self.notifier = notifier
        self.app_url = app_url
        self.app_name = app_name
        self.token_ttl = token_ttl

    async def execute(
        self, command: RegisterCommand
    ) -> Result[Union[RegisterResponse, EmailUnverifiedResponse]]:
        """
        Execute register use case

        Args:
            command: RegisterCommand with kind, contact details and optional business data

        Returns:
            Result with RegisterResponse, EmailUnverifiedResponse, or Error

        Errors:
            - INVALID_FIELDS: missing or malformed fields for the account kind
            - PHONE_IN_USE: phone already registered
            - EMAIL_EXISTS: email already registered and verified
            - INVALID_EMAIL_DOMAIN: email domain has no MX records
            - ACCOUNT_CONFLICT: concurrent registration won the unique constraint
        """
        email = normalize_email(command.email)

        # Uniqueness pre-checks (read only; the unique constraints stay authoritative)
        async with self.uow:
            registry = AccountRegistry(self.uow)

            validation = registry.validate_fields(
                command.kind,
                command.name,
                email,
                command.phone,
                command.business_name,
                command.tax_id,
            )
            if validation.is_err():
                return Return.err(validation.error)

            if await registry.find_by_phone(command.phone) is not None:
                return Return.err(Error("PHONE_IN_USE", "Phone number already in use"))

            existing = await registry.find_by_email(email)
            if existing is not None:
                if existing.email_verified:
                    return Return.err(
                        Error("EMAIL_EXISTS", "Account with this email already exists")
                    )
                return Return.ok(EmailUnverifiedResponse(email=existing.email))

        # No transaction is held across the DNS lookup
        domain = email.rsplit("@", 1)[-1]
        if not await self.mail_domains.accepts_mail(domain):
            return Return.err(
                Error(
                    "INVALID_EMAIL_DOMAIN",
                    "Email domain appears invalid or has no MX records",
                )
            )

        async with self.uow:
            registry = AccountRegistry(self.uow)
            created = await registry.create(
                kind=command.kind,
                name=command.name,
                email=email,
                phone=command.phone,
                business_name=command.business_name,
                tax_id=command.tax_id,
            )
            if created.is_err():
                return Return.err(created.error)
            account = created.value

            # Token has a required foreign key to a committed account
            await self.uow.commit()

            issued = await CredentialTokenService(self.uow, self.token_ttl).issue(account.id)
            await self.uow.commit()

            response = RegisterResponse(account=AccountInfo.from_account(account))
            subject, html = password_setup_email(
                self.app_name,
                set_password_link(self.app_url, issued.raw_token),
                user_name=account.name,
                expires_in=describe_ttl(self.token_ttl),
                reason="registration",
            )
            recipient = account.email

        # Registration success is decided by the database state, not by delivery
        self.notifier.notify(recipient, subject, html)
        logger.info("Registered account %s", response.account.id)

        return Return.ok(response)
