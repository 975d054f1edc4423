"""
Verify Set-Password Token Use Case

Read-only check that lets the client test a link before showing the
password form.
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.credential_token_service import CredentialTokenService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import TokenValidityResponse


class VerifySetPasswordTokenUseCase:
    """
    Business Rules:
    - Never consumes or otherwise mutates the token
    - Reveals only valid / invalid (uniform INVALID_TOKEN error)
    - An empty token is rejected without a lookup (MISSING_TOKEN)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: Optional[str]) -> Result[TokenValidityResponse]:
        if not token:
            return Return.err(Error("MISSING_TOKEN", "Missing token"))

        async with self.uow:
            validation = await CredentialTokenService(self.uow).validate(token)
            if validation.is_err():
                return Return.err(validation.error)
            return Return.ok(TokenValidityResponse(valid=True))
