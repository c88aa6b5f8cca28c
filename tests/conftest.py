"""
QuickJob - Test Configuration and Fixtures

Provides async database sessions, test client, and helper fixtures
for all tests.
"""

import io
import os
import tempfile

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment BEFORE importing app code
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DEBUG"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="quickjob-test-uploads-")
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASSWORD"] = ""
os.environ["NOTIFY_BY_EMAIL"] = "false"

from src.database import Base, get_db
from src.main import app
from src.mailer import Mailer, get_mailer
from src.models import Account, AccountRole
from src.auth import hash_password, create_access_token
from src.notifications import NotificationEmitter
from src.rate_limit import rate_limit_store


DEFAULT_PASSWORD = "TestPassword123"


class RecordingMailer(Mailer):
    """Mailer that keeps sent messages in memory."""

    def __init__(self):
        super().__init__(
            host="localhost",
            port=25,
            username=None,
            password=None,
            from_email="noreply@quickjob.test",
            from_name="QuickJob",
        )
        self.sent = []

    async def send(self, to_email, subject, text_content, html_content=None):
        self.sent.append({"to": to_email, "subject": subject, "text": text_content})
        return True, f"test-{len(self.sent)}"


@pytest_asyncio.fixture
async def db():
    """Provide a session on a fresh in-memory database for each test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def emitter(db):
    """Notification emitter bound to the test session (no email copies)."""
    return NotificationEmitter(db)


@pytest_asyncio.fixture
async def client(db, mailer):
    """Provide an async HTTP test client wired to the test database and mailer."""
    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    rate_limit_store.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    rate_limit_store.reset()


@pytest.fixture
def make_account(db):
    """Factory creating committed accounts."""
    counter = {"n": 0}

    async def _make(
        role: str = AccountRole.CLIENT,
        name: str = None,
        email: str = None,
        password: str = DEFAULT_PASSWORD,
        email_verified: bool = True,
        avatar: str = None,
    ) -> Account:
        counter["n"] += 1
        account = Account(
            role=role,
            name=name or f"{role.title()} {counter['n']}",
            email=email or f"{role}{counter['n']}@example.com",
            password_hash=hash_password(password),
            email_verified=email_verified,
            is_verified=False,
            avatar=avatar,
        )
        db.add(account)
        await db.commit()
        await db.refresh(account)
        return account

    return _make


@pytest_asyncio.fixture
async def client_account(make_account):
    return await make_account(role=AccountRole.CLIENT, name="Carla Client")


@pytest_asyncio.fixture
async def professional_account(make_account):
    return await make_account(role=AccountRole.PROFESSIONAL, name="Pete Plumber")


@pytest_asyncio.fixture
async def admin_account(make_account):
    return await make_account(role=AccountRole.ADMIN, name="Ada Admin", email="admin@example.com")


@pytest.fixture
def admin_headers(admin_account):
    """Authorization header for the admin account."""
    token = create_access_token(admin_account.id, admin_account.role)
    return {"Authorization": f"Bearer {token}"}


def pdf_upload(filename: str = "license.pdf", content: bytes = b"%PDF-1.4 test credential"):
    """Build a multipart file tuple for httpx."""
    return {"file": (filename, io.BytesIO(content), "application/pdf")}
