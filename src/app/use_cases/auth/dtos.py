"""
Authentication Use Case DTOs (Data Transfer Objects)

All Response classes for the auth domain.
Serialized in camelCase on the wire.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel

from src.app.services.session_issuer import IssuedSession, SessionUser
from src.domain.base import CamelModel


class OkResponse(CamelModel):
    """Generic acknowledgement (resend, forgot-password, set-password, sign-out)"""

    ok: Literal[True] = True
    message: Optional[str] = None


class EmailUnverifiedResponse(CamelModel):
    """
    Returned with HTTP 200 when an account exists but never completed the
    password bootstrap, so the client can offer to resend the link.
    """

    ok: Literal[False] = False
    code: Literal["EMAIL_UNVERIFIED"] = "EMAIL_UNVERIFIED"
    message: str = "Email registered but password not set"
    email: str


class TokenValidityResponse(CamelModel):
    valid: bool


class SignInResponse(CamelModel):
    success: Literal[True] = True
    message: str = "Login successful"
    login_record_id: str
    login_token: str


class SignInOutcome(BaseModel):
    """Sign-in result: the response body plus the session to hand to the client, if any"""

    body: Union[SignInResponse, EmailUnverifiedResponse]
    session: Optional[IssuedSession] = None


class SessionResponse(CamelModel):
    success: Literal[True] = True
    user: Optional[SessionUser] = None
