from datetime import date
from uuid import uuid4

from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel

from tenant_availability.core.time_utils import normalize_time, to_minutes


def _new_id() -> str:
    return str(uuid4())


class BusinessHoursBase(SQLModel):
    day_of_week: int = Field(ge=0, le=6, index=True)  # 0 = Sunday ... 6 = Saturday
    location_id: str | None = Field(default=None, index=True)
    open_time: str = "09:00"  # HH:MM, tenant-local wall clock
    close_time: str = "18:00"
    is_closed: bool = False


class BusinessHours(BusinessHoursBase, table=True):
    __tablename__ = "tenant_business_hours"
    id: str = Field(default_factory=_new_id, primary_key=True)
    tenant_id: str = Field(index=True)


class BusinessHoursIn(BusinessHoursBase):
    @field_validator("open_time", "close_time")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return normalize_time(v)

    @model_validator(mode="after")
    def _open_before_close(self) -> "BusinessHoursIn":
        if not self.is_closed and to_minutes(self.open_time) >= to_minutes(self.close_time):
            raise ValueError("open_time must be before close_time")
        return self


class BusinessHoursPublic(BusinessHoursBase):
    id: str
    tenant_id: str


class BusinessHoursExceptionBase(SQLModel):
    exception_date: date = Field(index=True)
    location_id: str | None = Field(default=None, index=True)
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = True
    reason: str | None = None


class BusinessHoursException(BusinessHoursExceptionBase, table=True):
    """Overrides the weekday rule for one calendar date."""

    __tablename__ = "tenant_business_hours_exceptions"
    id: str = Field(default_factory=_new_id, primary_key=True)
    tenant_id: str = Field(index=True)


class BusinessHoursExceptionIn(BusinessHoursExceptionBase):
    @field_validator("open_time", "close_time")
    @classmethod
    def _normalize(cls, v: str | None) -> str | None:
        return normalize_time(v) if v is not None else None

    @model_validator(mode="after")
    def _hours_when_open(self) -> "BusinessHoursExceptionIn":
        if self.is_closed:
            return self
        if not self.open_time or not self.close_time:
            raise ValueError("open_time and close_time are required when the day is open")
        if to_minutes(self.open_time) >= to_minutes(self.close_time):
            raise ValueError("open_time must be before close_time")
        return self


class BusinessHoursExceptionPublic(BusinessHoursExceptionBase):
    id: str
    tenant_id: str
