import logging
import re
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tenant_availability.api.deps import get_availability_source, get_current_user
from tenant_availability.api.schemas.availability import (
    AvailabilityResponse,
    AvailableSlot,
    NextAvailableResponse,
    OpenCheckResponse,
)
from tenant_availability.core.time_utils import local_now
from tenant_availability.models.user import User
from tenant_availability.services.availability_service import (
    NEXT_AVAILABLE_SEARCH_DAYS,
    AvailabilityError,
    AvailabilitySource,
    find_next_available,
    generate_availability,
    is_within_business_hours,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/availability", tags=["availability"])

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_requested_date(value: str) -> date:
    if not _DATE_RE.match(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date format. Use YYYY-MM-DD",
        )
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date",
        )


@router.get("", response_model=AvailabilityResponse)
async def get_availability(
    date_param: str = Query(..., alias="date"),
    appointment_type_id: str | None = Query(None),
    location_id: str | None = Query(None),
    agent_id: str | None = Query(None),
    source: AvailabilitySource = Depends(get_availability_source),
    current_user: User = Depends(get_current_user),
) -> AvailabilityResponse:
    """Open slots for one date in the caller's tenant."""
    day = parse_requested_date(date_param)
    try:
        result = await generate_availability(
            source,
            current_user.tenant_id,
            day,
            now=local_now(),
            appointment_type_id=appointment_type_id or None,
            location_id=location_id or None,
            agent_id=agent_id or None,
        )
    except AvailabilityError as e:
        logger.exception("Availability for tenant %s on %s failed: %s", current_user.tenant_id, day, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not load availability",
        ) from e
    return AvailabilityResponse.from_result(result)


@router.get("/next", response_model=NextAvailableResponse)
async def get_next_available(
    date_param: str | None = Query(None, alias="date"),
    appointment_type_id: str | None = Query(None),
    location_id: str | None = Query(None),
    agent_id: str | None = Query(None),
    source: AvailabilitySource = Depends(get_availability_source),
    current_user: User = Depends(get_current_user),
) -> NextAvailableResponse:
    """First open slot within a week of ``date`` (default today)."""
    now = local_now()
    start_day = parse_requested_date(date_param) if date_param else now.date()
    try:
        slot = await find_next_available(
            source,
            current_user.tenant_id,
            start_day,
            now=now,
            appointment_type_id=appointment_type_id or None,
            location_id=location_id or None,
            agent_id=agent_id or None,
        )
    except AvailabilityError as e:
        logger.exception("Next availability for tenant %s from %s failed: %s", current_user.tenant_id, start_day, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not load availability",
        ) from e
    return NextAvailableResponse(
        searched_from=start_day.isoformat(),
        days_searched=NEXT_AVAILABLE_SEARCH_DAYS,
        next_available=AvailableSlot.from_slot(slot) if slot else None,
    )


@router.get("/open", response_model=OpenCheckResponse)
async def get_open_check(
    at: str | None = Query(None),
    location_id: str | None = Query(None),
    source: AvailabilitySource = Depends(get_availability_source),
    current_user: User = Depends(get_current_user),
) -> OpenCheckResponse:
    """Whether the tenant is open at ``at`` (YYYY-MM-DDTHH:MM, default now)."""
    if at:
        try:
            moment = datetime.fromisoformat(at)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid datetime. Use YYYY-MM-DDTHH:MM",
            )
        if moment.tzinfo is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Use tenant-local time without an offset",
            )
    else:
        moment = local_now()
    try:
        is_open = await is_within_business_hours(source, current_user.tenant_id, moment, location_id or None)
    except AvailabilityError as e:
        logger.exception("Opening check for tenant %s at %s failed: %s", current_user.tenant_id, moment, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not load business hours",
        ) from e
    return OpenCheckResponse(at=moment, is_open=is_open)
