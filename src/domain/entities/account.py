"""
Account Entity

Represents a registered individual or business.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from src.domain.base import utcnow
from .enums import AccountKind

if TYPE_CHECKING:
    from .credential_token import CredentialToken
    from .login_record import LoginRecord


class Account(SQLModel, table=True):
    """
    Account entity - a registered individual or business.

    Business Rules:
    - id is external-facing: <IND|BSN><year><5 random digits>
    - Email and phone are each unique across all accounts
    - password_hash is null until the credential bootstrap completes
    - email_verified flips to True in the same transaction that sets the password
    - suspended / terminated are owned by an external administrative process
    """

    __tablename__ = "accounts"

    id: str = Field(primary_key=True, max_length=16)
    kind: AccountKind

    name: Optional[str] = Field(default=None, max_length=255)
    email: str = Field(unique=True, index=True, max_length=255)
    phone: str = Field(unique=True, index=True, max_length=20)

    # Business accounts only
    business_name: Optional[str] = Field(default=None, max_length=255)
    tax_id: Optional[str] = Field(default=None, max_length=32)

    # Credential state
    password_hash: Optional[str] = Field(default=None, max_length=60)  # Bcrypt output is 60 chars
    email_verified: bool = Field(default=False)
    phone_verified: bool = Field(default=False)

    # Lifecycle flags
    suspended: bool = Field(default=False)
    suspended_count: int = Field(default=0)
    terminated: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    credential_tokens: list["CredentialToken"] = Relationship(
        back_populates="account",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    login_records: list["LoginRecord"] = Relationship(
        back_populates="account",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    __table_args__ = (Index("idx_account_email_verified", "email_verified"),)

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

    @property
    def is_email_verified(self) -> bool:
        return self.email_verified

    @property
    def is_suspended(self) -> bool:
        return self.suspended

    @property
    def is_terminated(self) -> bool:
        return self.terminated
