from datetime import timedelta
from typing import Optional, Union

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.app.services.geo_locator import IGeoLocator
from src.app.services.mail_domain_validator import IMailDomainValidator
from src.app.services.notifier import BestEffortNotifier
from src.app.services.session_issuer import ISessionIssuer, IssuedSession
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    EmailUnverifiedResponse,
    ForgotPasswordUseCase,
    OkResponse,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    ResendRegistrationUseCase,
    SetPasswordUseCase,
    SignInResponse,
    SignInUseCase,
    TokenValidityResponse,
    VerifySetPasswordTokenUseCase,
)
from src.depends import (
    get_geo_locator,
    get_mail_domain_validator,
    get_notifier,
    get_session_issuer,
    get_unit_of_work,
)
from src.domain.base import CamelModel
from src.domain.device import DeviceInfo, device_info_from_headers, merge_device_info
from src.domain.entities import AccountKind

router = APIRouter(tags=["Authentication"])


def token_ttl() -> timedelta:
    return timedelta(minutes=ApplicationConfig.TOKEN_TTL_MINUTES)


def request_device(request: Request, client: Optional[DeviceInfo]) -> DeviceInfo:
    """Client-supplied device descriptor with gaps filled from request headers"""
    server = device_info_from_headers(
        request.headers, request.client.host if request.client else None
    )
    return merge_device_info(client, server)


class RegisterRequest(CamelModel):
    """
    Register HTTP request payload

    Validates the HTTP shape before converting to RegisterCommand. Field
    rules that depend on the account kind are enforced by the use case.
    """

    kind: AccountKind = Field(..., description="INDIVIDUAL or BUSINESS")
    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    phone: str = Field(..., max_length=20)
    business_name: Optional[str] = Field(default=None, max_length=255)
    tax_id: Optional[str] = Field(
        default=None,
        max_length=32,
        validation_alias=AliasChoices("taxId", "tax_id", "gstin"),
    )


class ResendRequest(CamelModel):
    email: str = Field(..., max_length=255)


class ForgotPasswordRequest(CamelModel):
    identifier: str = Field(..., max_length=255, description="Email or phone number")


class VerifyTokenRequest(CamelModel):
    token: Optional[str] = None


class SetPasswordRequest(CamelModel):
    token: str = Field(..., max_length=256)
    password: str = Field(..., max_length=256)
    device_info: Optional[DeviceInfo] = None


class SignInRequest(CamelModel):
    identifier: str = Field(..., max_length=255, description="Email or phone number")
    password: str = Field(..., max_length=256)
    device_info: Optional[DeviceInfo] = None


@router.post(
    "/register", response_model=Union[RegisterResponse, EmailUnverifiedResponse]
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    mail_domains: IMailDomainValidator = Depends(get_mail_domain_validator),
    notifier: BestEffortNotifier = Depends(get_notifier),
):
    """
    Register an account

    Creates a password-less INDIVIDUAL or BUSINESS account and emails a
    set-password link. An existing unverified email answers 200 with
    code=EMAIL_UNVERIFIED so the client can offer a resend.

    Raises:
        - 400 Bad Request: Invalid fields or email domain without MX records
        - 409 Conflict: Phone in use, email already registered
    """
    command = RegisterCommand(
        kind=request.kind,
        name=request.name,
        email=request.email,
        phone=request.phone,
        business_name=request.business_name,
        tax_id=request.tax_id,
    )

    use_case = RegisterUseCase(
        uow,
        mail_domains,
        notifier,
        app_url=ApplicationConfig.APP_URL,
        app_name=ApplicationConfig.APP_NAME,
        token_ttl=token_ttl(),
    )
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_FIELDS", "INVALID_EMAIL_DOMAIN"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        if error.code in ("PHONE_IN_USE", "EMAIL_EXISTS", "ACCOUNT_CONFLICT"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.post("/register/resend", response_model=OkResponse)
async def resend_registration(
    request: ResendRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: BestEffortNotifier = Depends(get_notifier),
):
    """
    Resend the set-password link

    Always returns 200 so the response does not reveal whether the email is
    registered.
    """
    use_case = ResendRegistrationUseCase(
        uow,
        notifier,
        app_url=ApplicationConfig.APP_URL,
        app_name=ApplicationConfig.APP_NAME,
        token_ttl=token_ttl(),
        revoke_superseded=ApplicationConfig.REVOKE_SUPERSEDED_TOKENS,
    )
    result = await use_case.execute(request.email)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post("/forgot-password", response_model=OkResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: BestEffortNotifier = Depends(get_notifier),
):
    """
    Request a password reset link by email or phone

    Raises:
        - 400 Bad Request: Identifier is neither an email nor a phone number
    """
    use_case = ForgotPasswordUseCase(
        uow,
        notifier,
        app_url=ApplicationConfig.APP_URL,
        app_name=ApplicationConfig.APP_NAME,
        token_ttl=token_ttl(),
        revoke_superseded=ApplicationConfig.REVOKE_SUPERSEDED_TOKENS,
    )
    result = await use_case.execute(request.identifier)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_IDENTIFIER":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.post("/set-password/verify", response_model=TokenValidityResponse)
async def verify_set_password_token(
    request: VerifyTokenRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Check a set-password token without consuming it

    Missing, invalid, expired and used tokens all answer 400
    {valid: false, error}.
    """
    result = await VerifySetPasswordTokenUseCase(uow).execute(request.token)

    if result.is_err():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"valid": False, "error": result.error.message},
        )

    return result.value


@router.post("/set-password", response_model=OkResponse)
async def set_password(
    request: SetPasswordRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: BestEffortNotifier = Depends(get_notifier),
):
    """
    Set a password from an emailed link

    Consumes the token, stores the password and marks the email verified.

    Raises:
        - 400 Bad Request: Invalid/expired/used token or weak password
    """
    device = request_device(http_request, request.device_info)

    use_case = SetPasswordUseCase(uow, notifier, app_name=ApplicationConfig.APP_NAME)
    result = await use_case.execute(request.token, request.password, device)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_TOKEN", "INVALID_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


def set_session_cookie(response: Response, session: IssuedSession) -> None:
    response.set_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        value=session.access_token,
        max_age=ApplicationConfig.SESSION_TTL_MINUTES * 60,
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


@router.post(
    "/signin", response_model=Union[SignInResponse, EmailUnverifiedResponse]
)
async def signin(
    request: SignInRequest,
    http_request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_issuer: ISessionIssuer = Depends(get_session_issuer),
    notifier: BestEffortNotifier = Depends(get_notifier),
    geo_locator: Optional[IGeoLocator] = Depends(get_geo_locator),
):
    """
    Sign in with email or phone and password

    On success a login record is written, a login alert is emailed and the
    session JWT is set as an HttpOnly cookie.

    Raises:
        - 401 Unauthorized: Invalid credentials or password not set
        - 403 Forbidden: Account suspended or terminated
    """
    device = request_device(http_request, request.device_info)

    use_case = SignInUseCase(
        uow,
        session_issuer,
        notifier,
        app_name=ApplicationConfig.APP_NAME,
        geo_locator=geo_locator,
    )
    result = await use_case.execute(request.identifier, request.password, device)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_CREDENTIALS", "PASSWORD_NOT_SET"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        if error.code in ("ACCOUNT_SUSPENDED", "ACCOUNT_TERMINATED"):
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    outcome = result.value
    if outcome.session is not None:
        set_session_cookie(response, outcome.session)

    return outcome.body
