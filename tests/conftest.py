"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENV", "test")

from datetime import date, datetime  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import tenant_availability.models  # noqa: E402,F401
from tenant_availability.core.db import get_session  # noqa: E402
from tenant_availability.core.security import create_access_token  # noqa: E402
from tenant_availability.main import app  # noqa: E402
from tenant_availability.models.appointment_settings import AppointmentSettings, AppointmentType  # noqa: E402
from tenant_availability.models.availability import AgentAvailability, ExistingAppointment  # noqa: E402
from tenant_availability.models.business_hours import BusinessHours, BusinessHoursException  # noqa: E402
from tenant_availability.models.user import User  # noqa: E402
from tenant_availability.services.availability_service import UpstreamLookupError  # noqa: E402

TENANT = "tenant-1"
MONDAY = date(2025, 3, 3)
SUNDAY = date(2025, 3, 2)
# A moment well before MONDAY so minimum notice never applies
LAST_WEEK = datetime(2025, 2, 24, 8, 0)


class FakeSource:
    """In-memory AvailabilitySource. Records the lookups it served and can be told to fail one."""

    def __init__(self) -> None:
        self.hours: dict[tuple[int, str | None], BusinessHours] = {}
        self.exceptions: dict[tuple[date, str | None], BusinessHoursException] = {}
        self.settings: AppointmentSettings | None = None
        self.types: dict[str, AppointmentType] = {}
        self.agents: dict[str, AgentAvailability] = {}
        self.appointments: list[ExistingAppointment] = []
        self.fail_on: str | None = None
        self.calls: list[str] = []

    def _lookup(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise UpstreamLookupError(name, "boom")

    def set_hours(self, weekday: int, open_time: str = "09:00", close_time: str = "12:00",
                  is_closed: bool = False, location_id: str | None = None) -> None:
        self.hours[(weekday, location_id)] = BusinessHours(
            tenant_id=TENANT, day_of_week=weekday, location_id=location_id,
            open_time=open_time, close_time=close_time, is_closed=is_closed,
        )

    def set_exception(self, day: date, open_time: str | None = None, close_time: str | None = None,
                      is_closed: bool = True, location_id: str | None = None) -> None:
        self.exceptions[(day, location_id)] = BusinessHoursException(
            tenant_id=TENANT, exception_date=day, location_id=location_id,
            open_time=open_time, close_time=close_time, is_closed=is_closed,
        )

    def book(self, start_time: str, end_time: str) -> None:
        self.appointments.append(ExistingAppointment(start_time=start_time, end_time=end_time))

    async def get_business_hours(self, tenant_id, weekday, location_id):
        self._lookup("business_hours")
        return self.hours.get((weekday, location_id))

    async def get_date_exception(self, tenant_id, day, location_id):
        self._lookup("date_exception")
        return self.exceptions.get((day, location_id))

    async def get_appointment_settings(self, tenant_id):
        self._lookup("appointment_settings")
        return self.settings

    async def get_appointment_type(self, tenant_id, type_id):
        self._lookup("appointment_type")
        return self.types.get(type_id)

    async def get_agent_availability(self, tenant_id, agent_id):
        self._lookup("agent_availability")
        return self.agents.get(agent_id)

    async def list_appointments(self, tenant_id, day, location_id, agent_id):
        self._lookup("appointments")
        return list(self.appointments)


@pytest.fixture
def source() -> FakeSource:
    """Open Monday 09:00-12:00, no settings row (defaults apply)."""
    fake = FakeSource()
    fake.set_hours(1)
    return fake


@pytest_asyncio.fixture
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest_asyncio.fixture
async def client(session_maker):
    async def _session_override():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _session_override
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def users(session_maker) -> dict[str, User]:
    """An admin and an agent in TENANT, and an admin in another tenant."""
    rows = {
        "admin": User(id="admin-1", tenant_id=TENANT, email="admin@example.com", role="tenant_admin"),
        "agent": User(id="agent-1", tenant_id=TENANT, email="agent@example.com", role="agent"),
        "other": User(id="admin-2", tenant_id="tenant-2", email="other@example.com", role="tenant_admin"),
    }
    async with session_maker() as s:
        s.add_all(rows.values())
        await s.commit()
    return rows


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
