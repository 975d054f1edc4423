import pytest

from src.app.use_cases.auth.verify_set_password_token_use_case import (
    VerifySetPasswordTokenUseCase,
)


@pytest.mark.asyncio
async def test_valid_token(mock_uow, make_token):
    mock_uow.credential_tokens.get_redeemable_by_hash.return_value = make_token()

    result = await VerifySetPasswordTokenUseCase(mock_uow).execute("raw")

    assert result.is_ok()
    assert result.value.valid is True
    mock_uow.credential_tokens.mark_used.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_token(mock_uow):
    result = await VerifySetPasswordTokenUseCase(mock_uow).execute("raw")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, ""])
async def test_missing_token(mock_uow, token):
    result = await VerifySetPasswordTokenUseCase(mock_uow).execute(token)

    assert result.is_err()
    assert result.error.code == "MISSING_TOKEN"
    assert result.error.message == "Missing token"
    mock_uow.credential_tokens.get_redeemable_by_hash.assert_not_called()
