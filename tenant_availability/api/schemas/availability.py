from datetime import datetime

from pydantic import BaseModel

from tenant_availability.models.availability import AvailabilityResult, TimeSlot
from tenant_availability.models.business_hours import BusinessHoursExceptionPublic, BusinessHoursPublic


class AvailableSlot(BaseModel):
    start_time: str  # HH:MM
    end_time: str
    start_datetime: datetime
    end_datetime: datetime

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "AvailableSlot":
        return cls(
            start_time=slot.start.strftime("%H:%M"),
            end_time=slot.end.strftime("%H:%M"),
            start_datetime=slot.start,
            end_datetime=slot.end,
        )


class BusinessHoursInfo(BaseModel):
    open_time: str
    close_time: str
    is_closed: bool


class AvailabilityResponse(BaseModel):
    available_slots: list[AvailableSlot]
    business_hours: BusinessHoursInfo
    date: str  # YYYY-MM-DD
    is_exception_day: bool

    @classmethod
    def from_result(cls, result: AvailabilityResult) -> "AvailabilityResponse":
        return cls(
            available_slots=[AvailableSlot.from_slot(s) for s in result.slots],
            business_hours=BusinessHoursInfo(**result.business_hours.model_dump()),
            date=result.day.isoformat(),
            is_exception_day=result.is_exception_day,
        )


class NextAvailableResponse(BaseModel):
    searched_from: str  # YYYY-MM-DD
    days_searched: int
    next_available: AvailableSlot | None = None


class OpenCheckResponse(BaseModel):
    at: datetime
    is_open: bool


class BusinessHoursOverview(BaseModel):
    regular_hours: list[BusinessHoursPublic]
    exceptions: list[BusinessHoursExceptionPublic] | None = None
