"""
Unit tests for SignInUseCase

Covers the gate order, login record bookkeeping and session issuance.
"""
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from libs.result import Error, Return
from src.app.services.passwords import hash_password
from src.app.services.session_issuer import IssuedSession, SessionUser
from src.app.use_cases.auth import EmailUnverifiedResponse, SignInResponse
from src.app.use_cases.auth.signin_use_case import (
    SignInUseCase,
    generate_login_token,
    to_base36,
)
from src.domain.base import utcnow
from src.domain.device import DeviceInfo, GeoLocation

PASSWORD = "SecurePass123!"


@pytest.fixture(scope="module")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def session_issuer():
    issuer = MagicMock()
    issuer.issue_session = AsyncMock(
        return_value=Return.ok(
            IssuedSession(
                access_token="jwt",
                expires_at=utcnow() + timedelta(days=30),
                user=SessionUser(id="IND202512345", email="jane@example.com", phone="9876543210"),
            )
        )
    )
    return issuer


@pytest.fixture
def use_case(mock_uow, session_issuer, notifier):
    return SignInUseCase(mock_uow, session_issuer, notifier, app_name="Acme")


@pytest.fixture
def active_account(make_account, password_hash):
    return make_account(password_hash=password_hash, email_verified=True)


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"


def test_login_token_shape():
    token = generate_login_token("IND202512345")

    assert len(token) == 32
    assert token.isalnum()
    assert token == token.lower()
    assert token != generate_login_token("IND202512345")


@pytest.mark.asyncio
async def test_successful_signin(use_case, mock_uow, session_issuer, notifier, active_account):
    mock_uow.accounts.get_by_email.return_value = active_account
    device = DeviceInfo(
        browser_name="Chrome",
        ip="203.0.113.7",
        user_agent="Mozilla/5.0",
        location=GeoLocation(city="Pune", country="India"),
    )

    result = await use_case.execute("jane@example.com", PASSWORD, device)

    assert result.is_ok()
    outcome = result.value
    assert isinstance(outcome.body, SignInResponse)
    assert outcome.body.message == "Login successful"
    assert outcome.session.access_token == "jwt"

    record = mock_uow.login_records.create.call_args[0][0]
    assert record.account_id == active_account.id
    assert record.ip == "203.0.113.7"
    assert record.user_agent == "Mozilla/5.0"
    assert record.location["city"] == "Pune"
    assert record.login_token == outcome.body.login_token
    assert outcome.body.login_record_id == str(record.id)
    mock_uow.commit.assert_called_once()

    session_issuer.issue_session.assert_called_once_with(
        "jane@example.com", PASSWORD, record.login_token, record.id
    )

    to, subject, html = notifier.notify.call_args[0]
    assert to == "jane@example.com"
    assert subject == "New sign-in to your Acme account"
    assert "Pune, India" in html


@pytest.mark.asyncio
async def test_unknown_account(use_case, mock_uow, session_issuer):
    result = await use_case.execute("ghost@example.com", PASSWORD)

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.login_records.create.assert_not_called()
    session_issuer.issue_session.assert_not_called()


@pytest.mark.asyncio
async def test_unparseable_identifier_is_invalid_credentials(use_case):
    result = await use_case.execute("jane", PASSWORD)

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_unverified_email_skips_password_check(use_case, mock_uow, make_account):
    mock_uow.accounts.get_by_email.return_value = make_account(
        email_verified=False, suspended=True
    )

    result = await use_case.execute("jane@example.com", "anything")

    assert result.is_ok()
    body = result.value.body
    assert isinstance(body, EmailUnverifiedResponse)
    assert body.email == "jane@example.com"
    assert result.value.session is None
    mock_uow.login_records.create.assert_not_called()


@pytest.mark.asyncio
async def test_suspended_before_terminated(
    use_case, mock_uow, session_issuer, notifier, make_account, password_hash
):
    mock_uow.accounts.get_by_email.return_value = make_account(
        email_verified=True, suspended=True, terminated=True, password_hash=password_hash
    )

    result = await use_case.execute("jane@example.com", PASSWORD)

    assert result.error.code == "ACCOUNT_SUSPENDED"
    assert result.error.message == "Your account has been suspended"
    mock_uow.login_records.create.assert_not_called()
    session_issuer.issue_session.assert_not_called()
    notifier.notify.assert_not_called()


@pytest.mark.asyncio
async def test_terminated(use_case, mock_uow, session_issuer, make_account, password_hash):
    mock_uow.accounts.get_by_phone.return_value = make_account(
        email_verified=True, terminated=True, password_hash=password_hash
    )

    result = await use_case.execute("9876543210", PASSWORD)

    assert result.error.code == "ACCOUNT_TERMINATED"
    mock_uow.login_records.create.assert_not_called()
    session_issuer.issue_session.assert_not_called()


@pytest.mark.asyncio
async def test_password_not_set(use_case, mock_uow, make_account):
    mock_uow.accounts.get_by_email.return_value = make_account(email_verified=True)

    result = await use_case.execute("jane@example.com", PASSWORD)

    assert result.error.code == "PASSWORD_NOT_SET"


@pytest.mark.asyncio
async def test_wrong_password(use_case, mock_uow, active_account):
    mock_uow.accounts.get_by_email.return_value = active_account

    result = await use_case.execute("jane@example.com", "WrongPass123!")

    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.login_records.create.assert_not_called()


@pytest.mark.asyncio
async def test_session_refusal_closes_record(use_case, mock_uow, session_issuer, active_account):
    mock_uow.accounts.get_by_email.return_value = active_account
    session_issuer.issue_session.return_value = Return.err(
        Error("INVALID_CREDENTIALS", "Invalid credentials")
    )

    result = await use_case.execute("jane@example.com", PASSWORD)

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    record = mock_uow.login_records.create.call_args[0][0]
    mock_uow.login_records.mark_logged_out.assert_called_once_with(record.id, record.logged_in_at)
    assert mock_uow.commit.call_count == 2


@pytest.mark.asyncio
async def test_missing_location_enriched_from_ip(mock_uow, session_issuer, notifier, active_account):
    mock_uow.accounts.get_by_email.return_value = active_account
    geo_locator = MagicMock()
    geo_locator.locate = AsyncMock(return_value=GeoLocation(lat=1.5, lon=2.5, city="Pune"))
    use_case = SignInUseCase(
        mock_uow, session_issuer, notifier, app_name="Acme", geo_locator=geo_locator
    )

    result = await use_case.execute("jane@example.com", PASSWORD, DeviceInfo(ip="203.0.113.7"))

    assert result.is_ok()
    geo_locator.locate.assert_called_once_with("203.0.113.7")
    record = mock_uow.login_records.create.call_args[0][0]
    assert record.location["city"] == "Pune"
    assert record.location["lat"] == 1.5


@pytest.mark.asyncio
async def test_client_location_not_overridden(mock_uow, session_issuer, notifier, active_account):
    mock_uow.accounts.get_by_email.return_value = active_account
    geo_locator = MagicMock()
    geo_locator.locate = AsyncMock()
    use_case = SignInUseCase(
        mock_uow, session_issuer, notifier, app_name="Acme", geo_locator=geo_locator
    )

    await use_case.execute(
        "jane@example.com",
        PASSWORD,
        DeviceInfo(ip="203.0.113.7", location=GeoLocation(city="Mumbai")),
    )

    geo_locator.locate.assert_not_called()
