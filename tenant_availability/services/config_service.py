"""Tenant configuration records read by the availability generator: weekly
business hours, date exceptions, appointment settings and types, and agent
working windows."""
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_availability.core.config import settings
from tenant_availability.models.appointment import Appointment
from tenant_availability.models.appointment_settings import (
    AppointmentSettings,
    AppointmentSettingsIn,
    AppointmentType,
    AppointmentTypeIn,
)
from tenant_availability.models.availability import AgentAvailability
from tenant_availability.models.business_hours import (
    BusinessHours,
    BusinessHoursException,
    BusinessHoursExceptionIn,
    BusinessHoursIn,
)
from tenant_availability.models.user import User


def default_appointment_settings(tenant_id: str) -> AppointmentSettings:
    """Unsaved settings row built from the configured defaults."""
    return AppointmentSettings(
        tenant_id=tenant_id,
        appointment_duration=settings.default_appointment_duration,
        buffer_time=settings.default_buffer_time,
        max_daily_appointments=None,
        min_notice_minutes=settings.default_min_notice_minutes,
        max_future_days=settings.default_max_future_days,
        require_approval=False,
        reminder_time_hours=settings.default_reminder_time_hours,
    )


async def list_business_hours(
    session: AsyncSession, tenant_id: str, location_id: str | None = None
) -> list[BusinessHours]:
    q = select(BusinessHours).where(BusinessHours.tenant_id == tenant_id).order_by(BusinessHours.day_of_week)
    if location_id:
        q = q.where(BusinessHours.location_id == location_id)
    result = await session.execute(q)
    return list(result.scalars().all())


async def replace_business_hours(
    session: AsyncSession, tenant_id: str, hours: list[BusinessHoursIn]
) -> list[BusinessHours]:
    """Replace the tenant's whole weekly schedule."""
    await session.execute(delete(BusinessHours).where(BusinessHours.tenant_id == tenant_id))
    rows = [BusinessHours(tenant_id=tenant_id, **h.model_dump()) for h in hours]
    session.add_all(rows)
    await session.flush()
    return sorted(rows, key=lambda r: (r.day_of_week, r.location_id or ""))


async def list_exceptions(
    session: AsyncSession, tenant_id: str, location_id: str | None = None
) -> list[BusinessHoursException]:
    q = (
        select(BusinessHoursException)
        .where(BusinessHoursException.tenant_id == tenant_id)
        .order_by(BusinessHoursException.exception_date)
    )
    if location_id:
        q = q.where(BusinessHoursException.location_id == location_id)
    result = await session.execute(q)
    return list(result.scalars().all())


async def create_exception(
    session: AsyncSession, tenant_id: str, data: BusinessHoursExceptionIn
) -> BusinessHoursException | None:
    """Returns None when an exception already exists for that date and location."""
    existing = await session.execute(
        select(BusinessHoursException.id).where(
            BusinessHoursException.tenant_id == tenant_id,
            BusinessHoursException.exception_date == data.exception_date,
            BusinessHoursException.location_id == data.location_id
            if data.location_id
            else BusinessHoursException.location_id.is_(None),
        )
    )
    if existing.first() is not None:
        return None
    exception = BusinessHoursException(tenant_id=tenant_id, **data.model_dump())
    session.add(exception)
    await session.flush()
    await session.refresh(exception)
    return exception


async def delete_exception(session: AsyncSession, tenant_id: str, exception_id: str) -> bool:
    result = await session.execute(
        delete(BusinessHoursException).where(
            BusinessHoursException.id == exception_id,
            BusinessHoursException.tenant_id == tenant_id,
        )
    )
    await session.flush()
    return bool(result.rowcount)


async def get_or_create_settings(session: AsyncSession, tenant_id: str) -> AppointmentSettings:
    result = await session.execute(select(AppointmentSettings).where(AppointmentSettings.tenant_id == tenant_id))
    row = result.scalar_one_or_none()
    if row is not None:
        return row
    row = default_appointment_settings(tenant_id)
    session.add(row)
    await session.flush()
    await session.refresh(row)
    return row


async def upsert_settings(
    session: AsyncSession, tenant_id: str, data: AppointmentSettingsIn
) -> AppointmentSettings:
    result = await session.execute(select(AppointmentSettings).where(AppointmentSettings.tenant_id == tenant_id))
    row = result.scalar_one_or_none()
    if row is None:
        row = AppointmentSettings(tenant_id=tenant_id, **data.model_dump())
        session.add(row)
    else:
        for key, value in data.model_dump().items():
            setattr(row, key, value)
    await session.flush()
    await session.refresh(row)
    return row


async def list_appointment_types(
    session: AsyncSession, tenant_id: str, active_only: bool = False
) -> list[AppointmentType]:
    q = select(AppointmentType).where(AppointmentType.tenant_id == tenant_id).order_by(AppointmentType.name)
    if active_only:
        q = q.where(AppointmentType.is_active.is_(True))
    result = await session.execute(q)
    return list(result.scalars().all())


async def create_appointment_type(
    session: AsyncSession, tenant_id: str, data: AppointmentTypeIn
) -> AppointmentType:
    row = AppointmentType(tenant_id=tenant_id, **data.model_dump())
    session.add(row)
    await session.flush()
    await session.refresh(row)
    return row


async def update_appointment_type(
    session: AsyncSession, tenant_id: str, type_id: str, data: AppointmentTypeIn
) -> AppointmentType | None:
    result = await session.execute(
        select(AppointmentType).where(AppointmentType.id == type_id, AppointmentType.tenant_id == tenant_id)
    )
    row = result.scalar_one_or_none()
    if row is None:
        return None
    for key, value in data.model_dump().items():
        setattr(row, key, value)
    await session.flush()
    await session.refresh(row)
    return row


async def appointment_type_in_use(session: AsyncSession, tenant_id: str, type_id: str) -> bool:
    result = await session.execute(
        select(Appointment.id)
        .where(Appointment.tenant_id == tenant_id, Appointment.appointment_type_id == type_id)
        .limit(1)
    )
    return result.first() is not None


async def delete_appointment_type(session: AsyncSession, tenant_id: str, type_id: str) -> bool:
    result = await session.execute(
        delete(AppointmentType).where(AppointmentType.id == type_id, AppointmentType.tenant_id == tenant_id)
    )
    await session.flush()
    return bool(result.rowcount)


async def get_agent(session: AsyncSession, tenant_id: str, agent_id: str) -> User | None:
    result = await session.execute(
        select(User).where(User.id == agent_id, User.tenant_id == tenant_id, User.role == "agent")
    )
    return result.scalar_one_or_none()


async def set_agent_availability(
    session: AsyncSession, agent: User, availability: AgentAvailability
) -> User:
    agent.availability = availability.model_dump(mode="json", exclude_none=True)
    session.add(agent)
    await session.flush()
    await session.refresh(agent)
    return agent
