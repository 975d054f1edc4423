"""
Use Cases

Organized into domain folders:
- auth/: Registration, credential bootstrap and sign-in flows
"""

from .auth import (
    RegisterUseCase,
    RegisterCommand,
    RegisterResponse,
    ResendRegistrationUseCase,
    ForgotPasswordUseCase,
    VerifySetPasswordTokenUseCase,
    SetPasswordUseCase,
    SignInUseCase,
    SignOutUseCase,
)

__all__ = [
    "RegisterUseCase",
    "RegisterCommand",
    "RegisterResponse",
    "ResendRegistrationUseCase",
    "ForgotPasswordUseCase",
    "VerifySetPasswordTokenUseCase",
    "SetPasswordUseCase",
    "SignInUseCase",
    "SignOutUseCase",
]
