"""
CredentialToken Entity

Single-use tokens that authorize setting an account password.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from src.domain.base import utcnow

if TYPE_CHECKING:
    from .account import Account


class CredentialToken(SQLModel, table=True):
    """
    CredentialToken entity - password bootstrap / reset token.

    Business Rules:
    - Expires one hour after issuance
    - token_hash is the SHA-256 hex digest of 256 random bits; the raw token is never stored
    - Single-use: used only ever moves from False to True
    - Rows are retained after use for audit
    """

    __tablename__ = "credential_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: str = Field(foreign_key="accounts.id", index=True, max_length=16)
    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 output

    used: bool = Field(default=False)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    account: Optional["Account"] = Relationship(back_populates="credential_tokens")

    __table_args__ = (
        Index("idx_credential_token_expires_at", "expires_at"),
        Index("idx_credential_token_used", "used"),
    )
