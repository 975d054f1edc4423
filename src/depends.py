from datetime import timedelta
from typing import Optional

from fastapi import BackgroundTasks, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.email_dispatcher import get_email_dispatcher
from src.adapter.services.ip_geo_locator import IpApiGeoLocator
from src.adapter.services.jwt_session_issuer import JwtSessionIssuer
from src.adapter.services.mx_validator import DnsMxValidator
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import verify_jwt
from src.app.services.geo_locator import IGeoLocator
from src.app.services.mail_domain_validator import IMailDomainValidator
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.notifier import BestEffortNotifier
from src.app.services.session_issuer import ISessionIssuer
from src.app.services.unit_of_work import UnitOfWork

security = HTTPBearer(auto_error=False)

__all__ = [
    "get_unit_of_work",
    "get_email_dispatcher",
    "get_notifier",
    "get_mail_domain_validator",
    "get_geo_locator",
    "get_session_issuer",
    "get_optional_session",
    "get_current_session",
]


async def get_unit_of_work(request: Request):
    async with request.app.state.database.session() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_notifier(
    background_tasks: BackgroundTasks,
    dispatcher: INotificationDispatcher = Depends(get_email_dispatcher),
) -> BestEffortNotifier:
    # Delivery runs after the response has been sent
    return BestEffortNotifier(dispatcher, background_tasks.add_task)


def get_mail_domain_validator() -> IMailDomainValidator:
    return DnsMxValidator(
        timeout=ApplicationConfig.DNS_TIMEOUT_SECONDS,
        enabled=ApplicationConfig.MX_CHECK_ENABLED,
    )


def get_geo_locator() -> Optional[IGeoLocator]:
    if not ApplicationConfig.GEO_LOOKUP_ENABLED:
        return None
    return IpApiGeoLocator(
        base_url=ApplicationConfig.GEO_LOOKUP_URL,
        timeout=ApplicationConfig.GEO_LOOKUP_TIMEOUT_SECONDS,
    )


def get_session_issuer(uow: UnitOfWork = Depends(get_unit_of_work)) -> ISessionIssuer:
    return JwtSessionIssuer(uow, ttl=timedelta(minutes=ApplicationConfig.SESSION_TTL_MINUTES))


async def get_optional_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    """
    Decode the session JWT from the Authorization header, falling back to the
    session cookie.

    Returns:
        Decoded JWT payload, or None when absent, invalid or expired
    """
    token = credentials.credentials if credentials else request.cookies.get(
        ApplicationConfig.SESSION_COOKIE_NAME
    )
    if not token:
        return None
    return verify_jwt(token)


async def get_current_session(
    claims: Optional[dict] = Depends(get_optional_session),
) -> dict:
    """
    Raises:
        ClientError: 401 if no valid session is presented
    """
    if claims is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Invalid or expired session"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return claims
