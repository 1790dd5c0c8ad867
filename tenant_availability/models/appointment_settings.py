from uuid import uuid4

from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid4())


class AppointmentSettingsBase(SQLModel):
    appointment_duration: int = Field(default=30, gt=0)
    buffer_time: int = Field(default=0, ge=0)
    max_daily_appointments: int | None = Field(default=None, ge=0)
    min_notice_minutes: int = Field(default=60, ge=0)
    max_future_days: int = Field(default=30, ge=0)
    require_approval: bool = False
    reminder_time_hours: int = Field(default=24, ge=0)


class AppointmentSettings(AppointmentSettingsBase, table=True):
    """Tenant-wide appointment defaults; one row per tenant."""

    __tablename__ = "tenant_appointment_settings"
    id: str = Field(default_factory=_new_id, primary_key=True)
    tenant_id: str = Field(unique=True, index=True)


class AppointmentSettingsIn(AppointmentSettingsBase):
    pass


class AppointmentSettingsPublic(AppointmentSettingsBase):
    id: str | None = None
    tenant_id: str


class AppointmentTypeBase(SQLModel):
    name: str
    description: str | None = None
    duration: int = Field(default=30, gt=0)
    buffer_time: int = Field(default=0, ge=0)
    max_daily_appointments: int | None = Field(default=None, ge=0)
    is_active: bool = True


class AppointmentType(AppointmentTypeBase, table=True):
    __tablename__ = "tenant_appointment_types"
    id: str = Field(default_factory=_new_id, primary_key=True)
    tenant_id: str = Field(index=True)


class AppointmentTypeIn(AppointmentTypeBase):
    pass


class AppointmentTypePublic(AppointmentTypeBase):
    id: str
    tenant_id: str
