"""
Register Use Case DTOs (Data Transfer Objects)

Command/Response pattern for clean architecture separation:
- RegisterCommand: Input to use case (validated business intent)
- RegisterResponse: Output from use case (structured result)
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from src.domain.base import CamelModel
from src.domain.entities import Account, AccountKind


class RegisterCommand(BaseModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    Contains only business-relevant data (no HTTP concerns).
    """

    kind: AccountKind
    name: str
    email: str
    phone: str
    business_name: Optional[str] = None
    tax_id: Optional[str] = None


class AccountInfo(CamelModel):
    """Public view of an account; never carries the password hash"""

    id: str
    kind: AccountKind
    name: Optional[str] = None
    email: str
    phone: str
    business_name: Optional[str] = None
    tax_id: Optional[str] = None
    email_verified: bool
    phone_verified: bool
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountInfo":
        return cls(
            id=account.id,
            kind=account.kind,
            name=account.name,
            email=account.email,
            phone=account.phone,
            business_name=account.business_name,
            tax_id=account.tax_id,
            email_verified=account.email_verified,
            phone_verified=account.phone_verified,
            created_at=account.created_at,
        )


class RegisterResponse(CamelModel):
    ok: Literal[True] = True
    account: AccountInfo
