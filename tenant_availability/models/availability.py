from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from tenant_availability.core.time_utils import WEEKDAY_NAMES, normalize_time, to_minutes


class TimeRange(BaseModel):
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return normalize_time(v)

    @model_validator(mode="after")
    def _start_before_end(self) -> "TimeRange":
        if to_minutes(self.start) >= to_minutes(self.end):
            raise ValueError(f"start {self.start} must be before end {self.end}")
        return self

    @property
    def minutes(self) -> tuple[int, int]:
        return to_minutes(self.start), to_minutes(self.end)


class AgentDayAvailability(BaseModel):
    enabled: bool = False
    slots: list[TimeRange] = []


class AgentAvailability(BaseModel):
    """Per-weekday working windows stored on the agent's user record.
    A missing weekday means the agent does not work that day."""

    model_config = ConfigDict(extra="ignore")

    sunday: AgentDayAvailability | None = None
    monday: AgentDayAvailability | None = None
    tuesday: AgentDayAvailability | None = None
    wednesday: AgentDayAvailability | None = None
    thursday: AgentDayAvailability | None = None
    friday: AgentDayAvailability | None = None
    saturday: AgentDayAvailability | None = None

    def windows_for(self, weekday: int) -> list[tuple[int, int]]:
        """Working windows in minutes for weekday 0 (Sunday) .. 6; empty when off."""
        day = getattr(self, WEEKDAY_NAMES[weekday])
        if day is None or not day.enabled:
            return []
        return [r.minutes for r in day.slots]


class ExistingAppointment(BaseModel):
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return normalize_time(v)


class HoursRule(BaseModel):
    open_time: str
    close_time: str
    is_closed: bool


class TimeSlot(BaseModel):
    start: datetime
    end: datetime
    available: bool = True


class AvailabilityResult(BaseModel):
    slots: list[TimeSlot]
    business_hours: HoursRule
    day: date
    is_exception_day: bool
