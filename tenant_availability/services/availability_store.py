from datetime import date

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_availability.models.appointment import Appointment
from tenant_availability.models.appointment_settings import AppointmentSettings, AppointmentType
from tenant_availability.models.availability import AgentAvailability, ExistingAppointment
from tenant_availability.models.business_hours import BusinessHours, BusinessHoursException
from tenant_availability.models.user import User
from tenant_availability.services.availability_service import UpstreamLookupError

CANCELLED_STATUS = "cancelled"


def _location_clause(column, location_id: str | None):
    # No location requested means the tenant-wide row (location_id IS NULL)
    return column == location_id if location_id else column.is_(None)


class SqlAvailabilitySource:
    """Reads the generator's inputs from the relational store. Every database or
    data-shape failure is reported as UpstreamLookupError naming the lookup."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_business_hours(
        self, tenant_id: str, weekday: int, location_id: str | None
    ) -> BusinessHours | None:
        try:
            result = await self.session.execute(
                select(BusinessHours).where(
                    BusinessHours.tenant_id == tenant_id,
                    BusinessHours.day_of_week == weekday,
                    _location_clause(BusinessHours.location_id, location_id),
                )
            )
            return result.scalars().first()
        except SQLAlchemyError as e:
            raise UpstreamLookupError("business hours", str(e)) from e

    async def get_date_exception(
        self, tenant_id: str, day: date, location_id: str | None
    ) -> BusinessHoursException | None:
        try:
            result = await self.session.execute(
                select(BusinessHoursException).where(
                    BusinessHoursException.tenant_id == tenant_id,
                    BusinessHoursException.exception_date == day,
                    _location_clause(BusinessHoursException.location_id, location_id),
                )
            )
            return result.scalars().first()
        except SQLAlchemyError as e:
            raise UpstreamLookupError("date exception", str(e)) from e

    async def get_appointment_settings(self, tenant_id: str) -> AppointmentSettings | None:
        try:
            result = await self.session.execute(
                select(AppointmentSettings).where(AppointmentSettings.tenant_id == tenant_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise UpstreamLookupError("appointment settings", str(e)) from e

    async def get_appointment_type(self, tenant_id: str, type_id: str) -> AppointmentType | None:
        try:
            result = await self.session.execute(
                select(AppointmentType).where(
                    AppointmentType.id == type_id,
                    AppointmentType.tenant_id == tenant_id,
                )
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise UpstreamLookupError("appointment type", str(e)) from e

    async def get_agent_availability(self, tenant_id: str, agent_id: str) -> AgentAvailability | None:
        try:
            result = await self.session.execute(
                select(User.availability).where(
                    User.id == agent_id,
                    User.tenant_id == tenant_id,
                    User.role == "agent",
                )
            )
            raw = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise UpstreamLookupError("agent availability", str(e)) from e
        if raw is None:
            return None
        try:
            return AgentAvailability.model_validate(raw)
        except ValidationError as e:
            raise UpstreamLookupError("agent availability", f"malformed availability for agent {agent_id}") from e

    async def list_appointments(
        self, tenant_id: str, day: date, location_id: str | None, agent_id: str | None
    ) -> list[ExistingAppointment]:
        q = select(Appointment.start_time, Appointment.end_time).where(
            Appointment.tenant_id == tenant_id,
            Appointment.appointment_date == day,
            Appointment.status != CANCELLED_STATUS,
        )
        if location_id:
            q = q.where(Appointment.location_id == location_id)
        if agent_id:
            q = q.where(Appointment.agent_id == agent_id)
        try:
            result = await self.session.execute(q.order_by(Appointment.start_time))
            rows = result.all()
        except SQLAlchemyError as e:
            raise UpstreamLookupError("appointments", str(e)) from e
        try:
            return [ExistingAppointment(start_time=start, end_time=end) for start, end in rows]
        except ValidationError as e:
            raise UpstreamLookupError("appointments", "malformed appointment times") from e
