import uuid
from collections.abc import AsyncGenerator
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import JSON, event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from renobid.common.enums import ProjectStatus, UserRole, VerificationStatus
from renobid.common.security import create_access_token
from renobid.common.timeutil import utcnow
from renobid.db.base import Base
from renobid.db.models import *  # noqa: F401,F403 - ensure all models loaded

# In-memory SQLite shared across one test through a single connection
TEST_DATABASE_URL = "sqlite+aiosqlite://"


# Make JSONB render as JSON for SQLite
@event.listens_for(Base.metadata, "before_create")
def _remap_jsonb(target, connection, **kw):
    if connection.dialect.name == "sqlite":
        for table in target.tables.values():
            for column in table.columns:
                if isinstance(column.type, JSONB):
                    column.type = JSON()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session):
    from renobid.api.deps import get_db
    from renobid.core.notifications.dispatcher import discard_pending, send_pending
    from renobid.main import app

    async def override_get_db():
        try:
            yield db_session
        except Exception:
            discard_pending(db_session)
            raise
        # no commit here; the session is rolled back at teardown
        send_pending(db_session)

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------- Factories ----------


@pytest.fixture
def make_user(db_session):
    from renobid.db.models.ranking import ContractorRanking
    from renobid.db.models.user import User

    async def _make(role: UserRole = UserRole.CONTRACTOR, completed_projects: int | None = None, **fields):
        defaults = {
            "id": uuid.uuid4(),
            "email": f"{role.value}_{uuid.uuid4().hex[:8]}@test.com",
            "full_name": f"Test {role.value.title()}",
            "role": role.value,
        }
        if role == UserRole.CONTRACTOR:
            defaults.update(
                phone="+15550001111",
                verification_status=VerificationStatus.VERIFIED.value,
                rating=4.5,
                total_projects=12,
            )
        user = User(**{**defaults, **fields})
        db_session.add(user)
        if completed_projects is not None:
            db_session.add(
                ContractorRanking(contractor_id=user.id, completed_projects=completed_projects)
            )
        await db_session.flush()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_project(db_session, homeowner_user):
    from renobid.db.models.project import Project

    async def _make(**fields):
        now = utcnow()
        defaults = {
            "code": f"PRJ-{uuid.uuid4().hex[:8].upper()}",
            "owner_id": homeowner_user.id,
            "title": "Kitchen renovation",
            "description": "Full kitchen remodel, 20m2",
            "status": ProjectStatus.OPEN.value,
            "bid_deadline": now + timedelta(days=7),
            "published_at": now - timedelta(hours=2),
            "max_bids": 20,
        }
        project = Project(**{**defaults, **fields})
        db_session.add(project)
        await db_session.flush()
        return project

    return _make


@pytest.fixture
def bid_payload():
    def _payload(project_id, **overrides):
        payload = {
            "project_id": str(project_id),
            "price": "1000000",
            "timeline": "2 weeks",
            "proposal": "Demolition, new cabinets, tiling and plumbing.",
            "attachments": [
                {"name": "quote.pdf", "url": "https://files.test/quote.pdf", "type": "application/pdf", "size": 2048}
            ],
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def make_bid(db_session):
    """Create a bid through the lifecycle engine, as a contractor would."""
    from renobid.core.bidding.schemas import BidCreate
    from renobid.core.bidding.service import BidService
    from renobid.core.notifications.dispatcher import discard_pending

    async def _make(project, contractor, price: str = "1000000", **fields):
        data = BidCreate(
            project_id=project.id,
            price=Decimal(price),
            timeline=fields.pop("timeline", "2 weeks"),
            proposal=fields.pop("proposal", "Complete renovation as described."),
        )
        bid = await BidService(db_session).create(contractor.id, data)
        # fixture bids count as committed before the test starts
        discard_pending(db_session)
        return bid

    return _make


# ---------- Users ----------


@pytest.fixture
async def homeowner_user(make_user):
    return await make_user(UserRole.HOMEOWNER, full_name="Test Homeowner")


@pytest.fixture
async def contractor_user(make_user):
    return await make_user(UserRole.CONTRACTOR, completed_projects=7, full_name="Acme Builders")


@pytest.fixture
async def unverified_contractor(make_user):
    return await make_user(
        UserRole.CONTRACTOR, verification_status=VerificationStatus.PENDING.value
    )


@pytest.fixture
async def admin_user(make_user):
    return await make_user(UserRole.ADMIN, full_name="Test Admin")


@pytest.fixture
async def open_project(make_project):
    return await make_project()


# ---------- Auth ----------


def _headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
def homeowner_headers(homeowner_user):
    return _headers(homeowner_user)


@pytest.fixture
def contractor_headers(contractor_user):
    return _headers(contractor_user)


@pytest.fixture
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture
def headers_for():
    return _headers


# ---------- Background work ----------


@pytest.fixture(autouse=True)
def mock_delivery():
    """Mock the Celery enqueue so no broker is needed."""
    with patch("renobid.tasks.notification_tasks.deliver_notification.delay") as delay:
        yield delay
