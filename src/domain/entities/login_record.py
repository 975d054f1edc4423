"""
LoginRecord Entity

Audit entry written for every successful sign-in.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, Relationship, SQLModel

from src.domain.base import utcnow

if TYPE_CHECKING:
    from .account import Account


class LoginRecord(SQLModel, table=True):
    """
    LoginRecord entity - session audit trail.

    Business Rules:
    - Created once credentials are verified, before the session is issued
    - login_token correlates the record with the issued session (not a credential)
    - logged_out_at is stamped by the sign-out event and is never before logged_in_at
    - location stores lat/lon/city/region/country when known
    """

    __tablename__ = "login_records"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: str = Field(foreign_key="accounts.id", index=True, max_length=16)

    ip: Optional[str] = Field(default=None, max_length=45)
    location: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    user_agent: Optional[str] = Field(default=None, max_length=512)
    login_token: str = Field(index=True, max_length=32)

    # Timestamps
    logged_in_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    logged_out_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    account: Optional["Account"] = Relationship(back_populates="login_records")

    __table_args__ = (Index("idx_login_record_logged_in_at", "logged_in_at"),)
