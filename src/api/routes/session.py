from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.jwt_session_issuer import session_user_from_claims
from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import OkResponse, SessionResponse, SignOutUseCase
from src.depends import get_current_session, get_optional_session, get_unit_of_work

router = APIRouter(tags=["Session"])


@router.get("/session", response_model=SessionResponse)
async def get_session(claims: Optional[dict] = Depends(get_optional_session)):
    """
    Current session user, or user=null when no valid session is presented
    """
    if claims is None:
        return SessionResponse(user=None)
    return SessionResponse(user=session_user_from_claims(claims))


@router.post("/signout", response_model=OkResponse)
async def signout(
    response: Response,
    claims: dict = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Sign out: stamps logged_out_at on the session's login record and clears
    the session cookie.

    Raises:
        - 401 Unauthorized: No valid session
    """
    try:
        login_record_id = UUID(claims.get("login_record_id") or "")
    except ValueError:
        raise ClientError(
            Error("UNAUTHORIZED", "Session has no login record"), status_code=401
        )

    result = await SignOutUseCase(uow).execute(login_record_id)
    if result.is_err():
        raise ServerError(result.error)

    response.delete_cookie(ApplicationConfig.SESSION_COOKIE_NAME, path="/")
    return result.value
