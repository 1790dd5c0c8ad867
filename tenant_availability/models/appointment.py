from datetime import date
from uuid import uuid4

from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid4())


class Appointment(SQLModel, table=True):
    """Booked appointment. Written by the booking workflow; only read here."""

    __tablename__ = "tenant_appointments"
    id: str = Field(default_factory=_new_id, primary_key=True)
    tenant_id: str = Field(index=True)
    appointment_date: date = Field(index=True)
    start_time: str  # HH:MM
    end_time: str
    location_id: str | None = Field(default=None, index=True)
    agent_id: str | None = Field(default=None, index=True)
    appointment_type_id: str | None = None
    status: str = "scheduled"
