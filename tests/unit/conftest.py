from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.services.notifier import BestEffortNotifier
from src.domain.base import utcnow
from src.domain.entities import Account, AccountKind, CredentialToken, LoginRecord


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all required repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.accounts = MagicMock()
    uow.accounts.get_by_id = AsyncMock(return_value=None)
    uow.accounts.get_by_email = AsyncMock(return_value=None)
    uow.accounts.get_by_phone = AsyncMock(return_value=None)
    uow.accounts.exists_by_id = AsyncMock(return_value=False)
    uow.accounts.create = AsyncMock(side_effect=lambda account: account)
    uow.accounts.update = AsyncMock(side_effect=lambda account: account)

    uow.credential_tokens = MagicMock()
    uow.credential_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.credential_tokens.get_redeemable_by_hash = AsyncMock(return_value=None)
    uow.credential_tokens.mark_used = AsyncMock(return_value=True)
    uow.credential_tokens.mark_all_used_for_account = AsyncMock(return_value=0)

    uow.login_records = MagicMock()
    uow.login_records.create = AsyncMock(side_effect=lambda record: record)
    uow.login_records.get_by_id = AsyncMock(return_value=None)
    uow.login_records.mark_logged_out = AsyncMock(return_value=True)

    return uow


@pytest.fixture
def notifier():
    """Notifier double; notify() calls are inspected through call_args"""
    return MagicMock(spec=BestEffortNotifier)


@pytest.fixture
def make_account():
    def factory(**overrides) -> Account:
        fields = dict(
            id="IND202512345",
            kind=AccountKind.INDIVIDUAL,
            name="Jane Doe",
            email="jane@example.com",
            phone="9876543210",
            password_hash=None,
            email_verified=False,
            created_at=utcnow(),
        )
        fields.update(overrides)
        return Account(**fields)

    return factory


@pytest.fixture
def make_token():
    def factory(account_id: str = "IND202512345", **overrides) -> CredentialToken:
        now = utcnow()
        fields = dict(
            id=uuid4(),
            account_id=account_id,
            token_hash="0" * 64,
            used=False,
            expires_at=now + timedelta(hours=1),
            created_at=now,
        )
        fields.update(overrides)
        return CredentialToken(**fields)

    return factory


@pytest.fixture
def make_login_record():
    def factory(account_id: str = "IND202512345", **overrides) -> LoginRecord:
        fields = dict(
            id=uuid4(),
            account_id=account_id,
            login_token="a" * 32,
            logged_in_at=utcnow(),
        )
        fields.update(overrides)
        return LoginRecord(**fields)

    return factory
