"""
Authentication Use Cases

Registration, credential bootstrap and sign-in business logic.
"""

from .register_use_case import RegisterUseCase
from .register_dto import RegisterCommand, RegisterResponse, AccountInfo
from .resend_registration_use_case import ResendRegistrationUseCase
from .forgot_password_use_case import ForgotPasswordUseCase
from .verify_set_password_token_use_case import VerifySetPasswordTokenUseCase
from .set_password_use_case import SetPasswordUseCase
from .signin_use_case import SignInUseCase
from .signout_use_case import SignOutUseCase
from .dtos import (
    OkResponse,
    EmailUnverifiedResponse,
    TokenValidityResponse,
    SignInResponse,
    SignInOutcome,
    SessionResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "ResendRegistrationUseCase",
    "ForgotPasswordUseCase",
    "VerifySetPasswordTokenUseCase",
    "SetPasswordUseCase",
    "SignInUseCase",
    "SignOutUseCase",
    # DTOs - Commands
    "RegisterCommand",
    # DTOs - Responses
    "RegisterResponse",
    "OkResponse",
    "EmailUnverifiedResponse",
    "TokenValidityResponse",
    "SignInResponse",
    "SignInOutcome",
    "SessionResponse",
    # DTOs - Nested Models
    "AccountInfo",
]
