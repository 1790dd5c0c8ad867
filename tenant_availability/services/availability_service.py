"""Bookable slot generation for one tenant and one calendar date.

All reads go through an ``AvailabilitySource``; the slot pipeline itself is pure
and works in integer minutes since midnight on tenant-local wall-clock times.
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import Protocol

from tenant_availability.core.config import settings
from tenant_availability.core.time_utils import contains, overlaps, to_minutes, weekday_index
from tenant_availability.models.appointment_settings import AppointmentSettings, AppointmentType
from tenant_availability.models.availability import (
    AgentAvailability,
    AvailabilityResult,
    ExistingAppointment,
    HoursRule,
    TimeSlot,
)
from tenant_availability.models.business_hours import BusinessHours, BusinessHoursException
from tenant_availability.services.config_service import default_appointment_settings

logger = logging.getLogger(__name__)

CLOSED_PLACEHOLDER = "00:00"
NEXT_AVAILABLE_SEARCH_DAYS = 7


class AvailabilityError(Exception):
    """Availability could not be computed."""


class UpstreamLookupError(AvailabilityError):
    def __init__(self, lookup: str, reason: str | None = None) -> None:
        self.lookup = lookup
        message = f"{lookup} lookup failed"
        super().__init__(f"{message}: {reason}" if reason else message)


class AvailabilitySource(Protocol):
    async def get_business_hours(
        self, tenant_id: str, weekday: int, location_id: str | None
    ) -> BusinessHours | None: ...

    async def get_date_exception(
        self, tenant_id: str, day: date, location_id: str | None
    ) -> BusinessHoursException | None: ...

    async def get_appointment_settings(self, tenant_id: str) -> AppointmentSettings | None: ...

    async def get_appointment_type(self, tenant_id: str, type_id: str) -> AppointmentType | None: ...

    async def get_agent_availability(self, tenant_id: str, agent_id: str) -> AgentAvailability | None: ...

    async def list_appointments(
        self, tenant_id: str, day: date, location_id: str | None, agent_id: str | None
    ) -> list[ExistingAppointment]: ...


def _closed(
    day: date,
    record: BusinessHours | BusinessHoursException | None,
    is_exception_day: bool,
) -> AvailabilityResult:
    return AvailabilityResult(
        slots=[],
        business_hours=HoursRule(
            open_time=(record.open_time if record else None) or CLOSED_PLACEHOLDER,
            close_time=(record.close_time if record else None) or CLOSED_PLACEHOLDER,
            is_closed=True,
        ),
        day=day,
        is_exception_day=is_exception_day,
    )


def build_slots(
    day: date,
    open_minute: int,
    close_minute: int,
    duration: int,
    buffer_time: int,
    existing: list[ExistingAppointment],
    agent_windows: list[tuple[int, int]] | None = None,
    not_before: datetime | None = None,
) -> list[TimeSlot]:
    """Candidate slots from opening time at a stride of ``duration + buffer_time``.

    Candidates starting before ``not_before`` are dropped. The rest are returned
    in chronological order with ``available`` set: a slot must sit inside one
    of ``agent_windows`` (``None`` means the agent is unconstrained) and must
    not overlap any existing appointment.
    """
    if duration <= 0 or buffer_time < 0:
        raise ValueError(f"Invalid slot geometry: duration={duration} buffer={buffer_time}")
    stride = duration + buffer_time
    booked = [(to_minutes(a.start_time), to_minutes(a.end_time)) for a in existing]
    midnight = datetime.combine(day, time.min)
    total_minutes = close_minute - open_minute

    slots: list[TimeSlot] = []
    minute = 0
    while minute + duration <= total_minutes:
        start = open_minute + minute
        end = start + duration
        minute += stride
        slot_start = midnight + timedelta(minutes=start)
        if not_before is not None and slot_start < not_before:
            continue
        available = True
        if agent_windows is not None and not any(
            contains(w_start, w_end, start, end) for w_start, w_end in agent_windows
        ):
            available = False
        elif any(overlaps(start, end, b_start, b_end) for b_start, b_end in booked):
            available = False
        slots.append(
            TimeSlot(start=slot_start, end=midnight + timedelta(minutes=end), available=available)
        )
    return slots


def apply_daily_cap(slots: list[TimeSlot], cap: int | None, booked_count: int) -> list[TimeSlot]:
    """Keep the earliest ``cap - booked_count`` slots when a cap applies."""
    if cap is None:
        return slots
    return slots[: max(0, cap - booked_count)]


async def generate_availability(
    source: AvailabilitySource,
    tenant_id: str,
    day: date,
    *,
    now: datetime,
    appointment_type_id: str | None = None,
    location_id: str | None = None,
    agent_id: str | None = None,
    exceptions_override_closed_days: bool | None = None,
) -> AvailabilityResult:
    """Open slots for ``day``. ``now`` is the tenant-local current time.

    Any error raised by ``source`` propagates; no partial result is returned.
    """
    if exceptions_override_closed_days is None:
        exceptions_override_closed_days = settings.exceptions_override_closed_days

    weekday = weekday_index(day)
    hours = await source.get_business_hours(tenant_id, weekday, location_id)
    weekday_closed = hours is None or hours.is_closed
    if weekday_closed and not exceptions_override_closed_days:
        logger.debug(
            "Tenant %s closed on weekday %d; date exceptions for %s not consulted",
            tenant_id, weekday, day,
        )
        return _closed(day, hours, is_exception_day=False)

    exception = await source.get_date_exception(tenant_id, day, location_id)
    if exception is not None and exception.is_closed:
        return _closed(day, exception, is_exception_day=True)
    if exception is None and weekday_closed:
        return _closed(day, hours, is_exception_day=False)

    if exception is not None:
        open_time = exception.open_time or (hours.open_time if hours else None)
        close_time = exception.close_time or (hours.close_time if hours else None)
        if not open_time or not close_time:
            return _closed(day, exception, is_exception_day=True)
    else:
        open_time, close_time = hours.open_time, hours.close_time

    tenant_settings = await source.get_appointment_settings(tenant_id)
    if tenant_settings is None:
        tenant_settings = default_appointment_settings(tenant_id)

    appointment_type = None
    if appointment_type_id:
        appointment_type = await source.get_appointment_type(tenant_id, appointment_type_id)
        if appointment_type is None:
            logger.debug("Appointment type %s not found for tenant %s; using tenant settings", appointment_type_id, tenant_id)

    if appointment_type is not None:
        duration, buffer_time = appointment_type.duration, appointment_type.buffer_time
    else:
        duration, buffer_time = tenant_settings.appointment_duration, tenant_settings.buffer_time
    if not duration or duration <= 0 or buffer_time is None or buffer_time < 0:
        raise AvailabilityError(f"Invalid appointment duration/buffer for tenant {tenant_id}")

    existing = await source.list_appointments(tenant_id, day, location_id, agent_id)

    agent_windows = None
    if agent_id:
        agent_availability = await source.get_agent_availability(tenant_id, agent_id)
        if agent_availability is not None:
            agent_windows = agent_availability.windows_for(weekday)

    not_before = None
    if now.date() == day:
        not_before = now + timedelta(minutes=tenant_settings.min_notice_minutes)

    try:
        open_minute, close_minute = to_minutes(open_time), to_minutes(close_time)
    except ValueError as e:
        raise AvailabilityError(f"Invalid business hours for tenant {tenant_id}: {e}") from e

    candidates = build_slots(
        day,
        open_minute,
        close_minute,
        duration,
        buffer_time,
        existing,
        agent_windows=agent_windows,
        not_before=not_before,
    )
    available = [s for s in candidates if s.available]

    cap = tenant_settings.max_daily_appointments
    if appointment_type is not None and appointment_type.max_daily_appointments is not None:
        cap = appointment_type.max_daily_appointments
    available = apply_daily_cap(available, cap, len(existing))

    return AvailabilityResult(
        slots=available,
        business_hours=HoursRule(open_time=open_time, close_time=close_time, is_closed=False),
        day=day,
        is_exception_day=exception is not None,
    )


async def find_next_available(
    source: AvailabilitySource,
    tenant_id: str,
    start_day: date,
    *,
    now: datetime,
    appointment_type_id: str | None = None,
    location_id: str | None = None,
    agent_id: str | None = None,
    days: int = NEXT_AVAILABLE_SEARCH_DAYS,
    exceptions_override_closed_days: bool | None = None,
) -> TimeSlot | None:
    """Earliest open slot on ``start_day`` or the ``days - 1`` dates after it."""
    for offset in range(days):
        day = start_day + timedelta(days=offset)
        result = await generate_availability(
            source,
            tenant_id,
            day,
            now=now,
            appointment_type_id=appointment_type_id,
            location_id=location_id,
            agent_id=agent_id,
            exceptions_override_closed_days=exceptions_override_closed_days,
        )
        if result.slots:
            return result.slots[0]
    logger.debug("No open slot for tenant %s in %d days from %s", tenant_id, days, start_day)
    return None


async def is_within_business_hours(
    source: AvailabilitySource,
    tenant_id: str,
    moment: datetime,
    location_id: str | None = None,
) -> bool:
    """Whether ``moment`` falls in opening hours, ``open <= t < close``.

    A date exception decides first, even on a weekday marked closed. An open
    exception missing a time takes it from the weekday row.
    """
    day = moment.date()
    hours = await source.get_business_hours(tenant_id, weekday_index(day), location_id)
    exception = await source.get_date_exception(tenant_id, day, location_id)
    if exception is not None:
        if exception.is_closed:
            return False
        open_time = exception.open_time or (hours.open_time if hours else None)
        close_time = exception.close_time or (hours.close_time if hours else None)
    elif hours is None or hours.is_closed:
        return False
    else:
        open_time, close_time = hours.open_time, hours.close_time
    if not open_time or not close_time:
        return False

    try:
        open_minute, close_minute = to_minutes(open_time), to_minutes(close_time)
    except ValueError as e:
        raise AvailabilityError(f"Invalid business hours for tenant {tenant_id}: {e}") from e
    minute = moment.hour * 60 + moment.minute
    return open_minute <= minute < close_minute
