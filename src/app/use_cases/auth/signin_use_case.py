"""
Sign In Use Case

Verifies credentials through a fixed sequence of gates, records the login,
sends a login alert and obtains a session from the session layer.
"""

import logging
import random
import re
import string
import time
from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.account_registry import AccountRegistry
from src.app.services.email_templates import login_notification_email
from src.app.services.geo_locator import IGeoLocator
from src.app.services.notifier import BestEffortNotifier
from src.app.services.passwords import burn_password_check, verify_password
from src.app.services.session_issuer import ISessionIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.device import DeviceInfo
from src.domain.entities import LoginRecord
from .dtos import EmailUnverifiedResponse, SignInOutcome, SignInResponse

logger = logging.getLogger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_lowercase
LOGIN_TOKEN_LENGTH = 32

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid credentials")


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_login_token(account_id: str) -> str:
    """
    Correlation token linking a login record to its session.

    Built from the millisecond clock, two random runs and an account id
    fragment; it is not a secret and is never used to authenticate.
    """
    timestamp = to_base36(int(time.time() * 1000))
    random_part = "".join(random.choices(BASE36_ALPHABET, k=13))
    id_part = re.sub(r"[^a-z0-9]", "", account_id[:8].lower())
    extra = "".join(random.choices(BASE36_ALPHABET, k=8))
    return (timestamp + random_part + id_part + extra)[:LOGIN_TOKEN_LENGTH]


class SignInUseCase:
    """
    Use case for signing in with an email or phone and a password.

    Business Rules (gates, in order):
    1. Unknown account -> INVALID_CREDENTIALS (a dummy bcrypt check keeps timing flat)
    2. Email not verified -> EMAIL_UNVERIFIED body, no password comparison
    3. Suspended -> ACCOUNT_SUSPENDED
    4. Terminated -> ACCOUNT_TERMINATED
    5. No password -> PASSWORD_NOT_SET
    6. Password mismatch -> INVALID_CREDENTIALS

    On success a LoginRecord is committed before the session is requested.
    If the session layer refuses, the record is closed immediately.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_issuer: ISessionIssuer,
        notifier: BestEffortNotifier,
        app_name: str,
        geo_locator: Optional[IGeoLocator] = None,
    ):
        self.uow = uow
        self.session_issuer = session_issuer
        self.notifier = notifier
        self.app_name = app_name
        self.geo_locator = geo_locator

    async def execute(
        self, identifier: str, password: str, device: Optional[DeviceInfo] = None
    ) -> Result[SignInOutcome]:
        """
        Execute sign in use case.

        Args:
            identifier: Email or phone number
            password: Plain text password
            device: Device descriptor, already merged with request headers

        Returns:
            Result with SignInOutcome (response body plus issued session), or Error

        Errors:
            - INVALID_CREDENTIALS: unknown account, wrong password or session refused
            - ACCOUNT_SUSPENDED / ACCOUNT_TERMINATED: account blocked
            - PASSWORD_NOT_SET: account has no password yet
        """
        device = device or DeviceInfo()

        async with self.uow:
            lookup = await AccountRegistry(self.uow).find_by_identifier(identifier)
            account = lookup.value if lookup.is_ok() else None

            if account is None:
                burn_password_check()
                return Return.err(INVALID_CREDENTIALS)

            if not account.is_email_verified:
                return Return.ok(
                    SignInOutcome(body=EmailUnverifiedResponse(email=account.email))
                )

            if account.is_suspended:
                return Return.err(
                    Error("ACCOUNT_SUSPENDED", "Your account has been suspended")
                )

            if account.is_terminated:
                return Return.err(
                    Error("ACCOUNT_TERMINATED", "Your account has been terminated")
                )

            if not account.has_password:
                return Return.err(
                    Error("PASSWORD_NOT_SET", "Password not set for this account")
                )

            if not verify_password(password, account.password_hash):
                return Return.err(INVALID_CREDENTIALS)

            account_id = account.id
            recipient = account.email

        # Network lookup runs with no transaction open
        if device.location is None and device.ip and self.geo_locator is not None:
            location = await self.geo_locator.locate(device.ip)
            if location is not None:
                device = device.model_copy(update={"location": location})

        login_token = generate_login_token(account_id)

        async with self.uow:
            record = await self.uow.login_records.create(
                LoginRecord(
                    account_id=account_id,
                    ip=device.ip,
                    location=device.location.model_dump() if device.location else None,
                    user_agent=device.user_agent,
                    login_token=login_token,
                    logged_in_at=utcnow(),
                )
            )
            await self.uow.commit()
            record_id = record.id
            logged_in_at = record.logged_in_at

        logger.info("Login record %s created for account %s", record_id, account_id)

        subject, html = login_notification_email(
            self.app_name, recipient, logged_in_at, device
        )
        self.notifier.notify(recipient, subject, html)

        issued = await self.session_issuer.issue_session(
            identifier, password, login_token, record_id
        )
        if issued.is_err():
            logger.warning(
                "Session refused for account %s (%s), closing login record %s",
                account_id,
                issued.error.code,
                record_id,
            )
            async with self.uow:
                await self.uow.login_records.mark_logged_out(record_id, logged_in_at)
                await self.uow.commit()
            return Return.err(INVALID_CREDENTIALS)

        return Return.ok(
            SignInOutcome(
                body=SignInResponse(
                    login_record_id=str(record_id), login_token=login_token
                ),
                session=issued.value,
            )
        )
