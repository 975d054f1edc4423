import re

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.depends import get_email_dispatcher, get_mail_domain_validator, get_unit_of_work
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.mail_domain_validator import IMailDomainValidator
from src.app.services.notification_dispatcher import INotificationDispatcher

API = "/api"
PASSWORD = "SecurePass123!"

SET_PASSWORD_LINK = re.compile(r"/set-password/([0-9a-f]{64})")


class RecordingDispatcher(INotificationDispatcher):
    """Keeps every outbound email in memory"""

    def __init__(self):
        self.messages = []

    async def send(self, to: str, subject: str, html: str) -> None:
        self.messages.append({"to": to, "subject": subject, "html": html})

    def last_token(self, to: str) -> str:
        for message in reversed(self.messages):
            if message["to"] == to:
                match = SET_PASSWORD_LINK.search(message["html"])
                if match:
                    return match.group(1)
        raise AssertionError(f"no set-password link sent to {to}")


class StaticMxValidator(IMailDomainValidator):
    def __init__(self, rejected=()):
        self.rejected = set(rejected)

    async def accepts_mail(self, domain: str) -> bool:
        return domain not in self.rejected


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def outbox():
    return RecordingDispatcher()


@pytest.fixture
def mx_validator():
    return StaticMxValidator(rejected={"no-mx.example"})


@pytest_asyncio.fixture
async def client(db_session, outbox, mx_validator):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_email_dispatcher] = lambda: outbox
    app.dependency_overrides[get_mail_domain_validator] = lambda: mx_validator

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register_account(client, outbox):
    """Register an individual account; with password set, complete the bootstrap too"""

    async def register(
        email: str = "jane@example.com",
        phone: str = "9876543210",
        password: str = None,
    ) -> dict:
        response = await client.post(
            f"{API}/register",
            json={"kind": "INDIVIDUAL", "name": "Jane Doe", "email": email, "phone": phone},
        )
        assert response.status_code == 200, response.text
        account = response.json()["account"]

        if password is not None:
            token = outbox.last_token(email)
            response = await client.post(
                f"{API}/set-password", json={"token": token, "password": password}
            )
            assert response.status_code == 200, response.text

        return account

    return register
