"""SqlAvailabilitySource against an in-memory SQLite database."""

import pytest
from sqlalchemy.exc import OperationalError

from conftest import LAST_WEEK, MONDAY, TENANT
from tenant_availability.models.appointment import Appointment
from tenant_availability.models.appointment_settings import AppointmentSettings, AppointmentType
from tenant_availability.models.business_hours import BusinessHours, BusinessHoursException
from tenant_availability.models.user import User
from tenant_availability.services.availability_service import UpstreamLookupError, generate_availability
from tenant_availability.services.availability_store import SqlAvailabilitySource


@pytest.fixture
def store(session) -> SqlAvailabilitySource:
    return SqlAvailabilitySource(session)


class TestBusinessHoursLookup:
    async def test_tenant_wide_and_location_rows(self, session, store):
        session.add_all([
            BusinessHours(tenant_id=TENANT, day_of_week=1, open_time="09:00", close_time="17:00"),
            BusinessHours(tenant_id=TENANT, day_of_week=1, location_id="loc-1", open_time="10:00", close_time="14:00"),
            BusinessHours(tenant_id="tenant-2", day_of_week=1, open_time="06:00", close_time="07:00"),
        ])
        await session.commit()

        tenant_wide = await store.get_business_hours(TENANT, 1, None)
        assert tenant_wide.open_time == "09:00"
        at_location = await store.get_business_hours(TENANT, 1, "loc-1")
        assert at_location.open_time == "10:00"
        assert await store.get_business_hours(TENANT, 1, "loc-2") is None
        assert await store.get_business_hours(TENANT, 2, None) is None

    async def test_exception_for_date(self, session, store):
        session.add(BusinessHoursException(tenant_id=TENANT, exception_date=MONDAY, is_closed=True, reason="Holiday"))
        await session.commit()

        exception = await store.get_date_exception(TENANT, MONDAY, None)
        assert exception.is_closed
        assert exception.reason == "Holiday"
        assert await store.get_date_exception(TENANT, MONDAY, "loc-1") is None


class TestSettingsLookup:
    async def test_missing_settings_is_none(self, store):
        assert await store.get_appointment_settings(TENANT) is None

    async def test_settings_and_type(self, session, store):
        session.add(AppointmentSettings(tenant_id=TENANT, appointment_duration=45))
        session.add(AppointmentType(id="type-1", tenant_id=TENANT, name="Visit", duration=60))
        await session.commit()

        settings_row = await store.get_appointment_settings(TENANT)
        assert settings_row.appointment_duration == 45
        appointment_type = await store.get_appointment_type(TENANT, "type-1")
        assert appointment_type.duration == 60
        assert await store.get_appointment_type("tenant-2", "type-1") is None


class TestAgentLookup:
    async def test_validated_availability(self, session, store):
        session.add(User(
            id="agent-1", tenant_id=TENANT, email="a@example.com", role="agent",
            availability={"monday": {"enabled": True, "slots": [{"start": "9:00", "end": "12:00"}]}},
        ))
        await session.commit()

        availability = await store.get_agent_availability(TENANT, "agent-1")
        assert availability.monday.slots[0].start == "09:00"
        assert availability.windows_for(1) == [(540, 720)]
        assert availability.windows_for(2) == []

    async def test_agent_without_metadata(self, session, store):
        session.add(User(id="agent-2", tenant_id=TENANT, email="b@example.com", role="agent"))
        await session.commit()
        assert await store.get_agent_availability(TENANT, "agent-2") is None
        assert await store.get_agent_availability(TENANT, "nobody") is None

    async def test_empty_metadata_is_a_constraint(self, session, store):
        session.add(User(id="agent-4", tenant_id=TENANT, email="d@example.com", role="agent", availability={}))
        await session.commit()

        availability = await store.get_agent_availability(TENANT, "agent-4")
        assert availability is not None
        assert all(availability.windows_for(weekday) == [] for weekday in range(7))

    async def test_malformed_metadata(self, session, store):
        session.add(User(
            id="agent-3", tenant_id=TENANT, email="c@example.com", role="agent",
            availability={"monday": {"enabled": True, "slots": [{"start": "noon", "end": "later"}]}},
        ))
        await session.commit()
        with pytest.raises(UpstreamLookupError) as exc:
            await store.get_agent_availability(TENANT, "agent-3")
        assert exc.value.lookup == "agent availability"


class TestAppointmentsLookup:
    async def test_filters(self, session, store):
        session.add_all([
            Appointment(tenant_id=TENANT, appointment_date=MONDAY, start_time="10:00", end_time="10:30",
                        location_id="loc-1", agent_id="agent-1"),
            Appointment(tenant_id=TENANT, appointment_date=MONDAY, start_time="09:00", end_time="09:30",
                        location_id="loc-2", agent_id="agent-2"),
            Appointment(tenant_id=TENANT, appointment_date=MONDAY, start_time="11:00", end_time="11:30",
                        status="cancelled"),
            Appointment(tenant_id="tenant-2", appointment_date=MONDAY, start_time="12:00", end_time="12:30"),
        ])
        await session.commit()

        everything = await store.list_appointments(TENANT, MONDAY, None, None)
        assert [a.start_time for a in everything] == ["09:00", "10:00"]
        by_location = await store.list_appointments(TENANT, MONDAY, "loc-1", None)
        assert [a.start_time for a in by_location] == ["10:00"]
        by_agent = await store.list_appointments(TENANT, MONDAY, None, "agent-2")
        assert [a.start_time for a in by_agent] == ["09:00"]


class TestEndToEnd:
    async def test_generate_from_database(self, session, store):
        session.add_all([
            BusinessHours(tenant_id=TENANT, day_of_week=1, open_time="09:00:00", close_time="12:00:00"),
            AppointmentSettings(tenant_id=TENANT, appointment_duration=60, max_daily_appointments=5),
            Appointment(tenant_id=TENANT, appointment_date=MONDAY, start_time="10:00", end_time="10:30"),
        ])
        await session.commit()

        result = await generate_availability(store, TENANT, MONDAY, now=LAST_WEEK)
        assert [s.start.strftime("%H:%M") for s in result.slots] == ["09:00", "11:00"]

    async def test_database_error_is_upstream_error(self, session, store, monkeypatch):
        async def broken_execute(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(session, "execute", broken_execute)
        with pytest.raises(UpstreamLookupError) as exc:
            await store.get_business_hours(TENANT, 1, None)
        assert exc.value.lookup == "business hours"

    async def test_agent_with_no_working_days_gets_no_slots(self, session, store):
        session.add_all([
            BusinessHours(tenant_id=TENANT, day_of_week=1, open_time="09:00", close_time="12:00"),
            User(id="agent-5", tenant_id=TENANT, email="e@example.com", role="agent", availability={}),
        ])
        await session.commit()

        unconstrained = await generate_availability(store, TENANT, MONDAY, now=LAST_WEEK)
        assert len(unconstrained.slots) == 6
        result = await generate_availability(store, TENANT, MONDAY, now=LAST_WEEK, agent_id="agent-5")
        assert result.slots == []
        assert result.business_hours.is_closed is False
