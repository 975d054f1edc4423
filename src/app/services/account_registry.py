"""
Account Registry

Creates and looks up accounts and applies the verification transition.
"""

import logging
import re
import secrets
from typing import Optional

from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Account, AccountKind

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]+$")
PHONE_PATTERN = re.compile(r"^\d{10,}$")

MAX_ID_ATTEMPTS = 5


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_email(identifier: str) -> bool:
    return bool(EMAIL_PATTERN.match(identifier))


def is_phone(identifier: str) -> bool:
    return bool(PHONE_PATTERN.match(identifier))


def generate_account_id(kind: AccountKind, year: Optional[int] = None) -> str:
    """<IND|BSN><year><5 random digits>, e.g. IND202512345"""
    year = year or utcnow().year
    return f"{kind.id_prefix}{year}{10000 + secrets.randbelow(90000)}"


class AccountRegistry:
    """
    Business Rules:
    - Identifiers are matched as email first, then phone, else rejected
    - Emails are stored and looked up lower-cased
    - New accounts start with no password and email_verified=False
    - External IDs are retried on collision (storage unique key is authoritative)
    - Email/phone uniqueness is pre-checked by the registration workflow; the
      unique constraints catch the race between that check and the insert
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def find_by_email(self, email: str) -> Optional[Account]:
        return await self.uow.accounts.get_by_email(normalize_email(email))

    async def find_by_phone(self, phone: str) -> Optional[Account]:
        return await self.uow.accounts.get_by_phone(phone.strip())

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        return await self.uow.accounts.get_by_id(account_id)

    async def find_by_identifier(self, identifier: str) -> Result[Optional[Account]]:
        """
        Look up an account by email or phone.

        Returns:
            Result with the Account (or None when no account matches),
            or Error(INVALID_IDENTIFIER) when the input is neither form
        """
        identifier = (identifier or "").strip()
        if is_email(identifier):
            return Return.ok(await self.find_by_email(identifier))
        if is_phone(identifier):
            return Return.ok(await self.find_by_phone(identifier))
        return Return.err(
            Error("INVALID_IDENTIFIER", "Please provide a valid email or phone")
        )

    def validate_fields(
        self,
        kind: AccountKind,
        name: Optional[str],
        email: Optional[str],
        phone: Optional[str],
        business_name: Optional[str] = None,
        tax_id: Optional[str] = None,
    ) -> Result[None]:
        missing = [
            field
            for field, value in (("name", name), ("email", email), ("phone", phone))
            if not value or not value.strip()
        ]
        if missing:
            return Return.err(
                Error(
                    "INVALID_FIELDS",
                    f"Missing fields for {kind.value.lower()}: {', '.join(missing)}",
                )
            )

        if not is_email(normalize_email(email)):
            return Return.err(Error("INVALID_FIELDS", "Email address is not valid"))

        if not is_phone(phone.strip()):
            return Return.err(
                Error("INVALID_FIELDS", "Phone number must contain at least 10 digits")
            )

        if kind == AccountKind.INDIVIDUAL and (business_name or tax_id):
            return Return.err(
                Error(
                    "INVALID_FIELDS",
                    "Business name and tax id are only accepted for business accounts",
                )
            )

        return Return.ok(None)

    async def _generate_unique_id(self, kind: AccountKind) -> Optional[str]:
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = generate_account_id(kind)
            if not await self.uow.accounts.exists_by_id(candidate):
                return candidate
            logger.warning("Account id collision on %s, retrying", candidate)
        return None

    async def create(
        self,
        kind: AccountKind,
        name: str,
        email: str,
        phone: str,
        business_name: Optional[str] = None,
        tax_id: Optional[str] = None,
    ) -> Result[Account]:
        """
        Create an account without a password.

        Errors:
            - INVALID_FIELDS: kind-specific required fields missing or malformed
            - ID_GENERATION_FAILED: no free external id after retries
            - ACCOUNT_CONFLICT: email or phone taken concurrently
        """
        validation = self.validate_fields(kind, name, email, phone, business_name, tax_id)
        if validation.is_err():
            return Return.err(validation.error)

        account_id = await self._generate_unique_id(kind)
        if account_id is None:
            return Return.err(
                Error("ID_GENERATION_FAILED", "Could not allocate an account id")
            )

        account = Account(
            id=account_id,
            kind=kind,
            name=name.strip(),
            email=normalize_email(email),
            phone=phone.strip(),
            business_name=business_name.strip() if business_name else None,
            tax_id=tax_id.strip().upper() if tax_id else None,
            password_hash=None,
            email_verified=False,
        )

        try:
            account = await self.uow.accounts.create(account)
        except IntegrityError:
            logger.warning("Unique constraint rejected account %s", account_id)
            await self.uow.rollback()
            return Return.err(
                Error("ACCOUNT_CONFLICT", "An account with this email or phone already exists")
            )

        logger.info("Created %s account %s", kind.value, account.id)
        return Return.ok(account)

    async def mark_verified_with_password(self, account: Account, password_hash: str) -> Account:
        """Set the password and mark the email verified (caller owns the transaction)"""
        account.password_hash = password_hash
        account.email_verified = True
        return await self.uow.accounts.update(account)
