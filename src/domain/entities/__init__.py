"""
Account Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import AccountKind

# Export all entities
from .account import Account
from .credential_token import CredentialToken
from .login_record import LoginRecord

__all__ = [
    # Enums
    "AccountKind",
    # Entities
    "Account",
    "CredentialToken",
    "LoginRecord",
]
