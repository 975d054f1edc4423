"""
Unit tests for ResendRegistrationUseCase
"""
import pytest

from src.app.use_cases.auth.resend_registration_use_case import ResendRegistrationUseCase


def make_use_case(mock_uow, notifier, **kwargs):
    return ResendRegistrationUseCase(
        mock_uow, notifier, app_url="http://localhost:3000", app_name="Acme", **kwargs
    )


@pytest.mark.asyncio
async def test_unknown_email_still_succeeds(mock_uow, notifier):
    result = await make_use_case(mock_uow, notifier).execute("ghost@example.com")

    assert result.is_ok()
    assert result.value.ok is True
    mock_uow.credential_tokens.create.assert_not_called()
    notifier.notify.assert_not_called()


@pytest.mark.asyncio
async def test_known_email_gets_new_link(mock_uow, notifier, make_account):
    mock_uow.accounts.get_by_email.return_value = make_account()

    result = await make_use_case(mock_uow, notifier).execute("jane@example.com")

    assert result.is_ok()
    mock_uow.credential_tokens.mark_all_used_for_account.assert_called_once_with("IND202512345")
    mock_uow.credential_tokens.create.assert_called_once()
    mock_uow.commit.assert_called_once()

    to, subject, html = notifier.notify.call_args[0]
    assert to == "jane@example.com"
    assert "(resend)" in subject
    assert "/set-password/" in html


@pytest.mark.asyncio
async def test_superseded_tokens_kept_when_revocation_disabled(mock_uow, notifier, make_account):
    mock_uow.accounts.get_by_email.return_value = make_account()

    result = await make_use_case(mock_uow, notifier, revoke_superseded=False).execute(
        "jane@example.com"
    )

    assert result.is_ok()
    mock_uow.credential_tokens.mark_all_used_for_account.assert_not_called()
    mock_uow.credential_tokens.create.assert_called_once()
