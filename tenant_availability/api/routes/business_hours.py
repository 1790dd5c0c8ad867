from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_availability.api.deps import get_admin_user, get_current_user
from tenant_availability.api.schemas.availability import BusinessHoursOverview
from tenant_availability.core.db import get_session
from tenant_availability.models.business_hours import (
    BusinessHoursExceptionIn,
    BusinessHoursExceptionPublic,
    BusinessHoursIn,
    BusinessHoursPublic,
)
from tenant_availability.models.user import User
from tenant_availability.services.config_service import (
    create_exception,
    delete_exception,
    list_business_hours,
    list_exceptions,
    replace_business_hours,
)

router = APIRouter(prefix="/business-hours", tags=["business-hours"])


@router.get("", response_model=BusinessHoursOverview)
async def get_business_hours(
    location_id: str | None = Query(None),
    include_exceptions: bool = Query(False),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> BusinessHoursOverview:
    hours = await list_business_hours(session, current_user.tenant_id, location_id)
    exceptions = None
    if include_exceptions:
        rows = await list_exceptions(session, current_user.tenant_id, location_id)
        exceptions = [BusinessHoursExceptionPublic.model_validate(e) for e in rows]
    return BusinessHoursOverview(
        regular_hours=[BusinessHoursPublic.model_validate(h) for h in hours],
        exceptions=exceptions,
    )


@router.put("", response_model=list[BusinessHoursPublic])
async def put_business_hours(
    body: list[BusinessHoursIn],
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_admin_user),
) -> list[BusinessHoursPublic]:
    """Replace the tenant's weekly schedule."""
    seen: set[tuple[int, str | None]] = set()
    for h in body:
        key = (h.day_of_week, h.location_id)
        if key in seen:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Duplicate hours for day {h.day_of_week}",
            )
        seen.add(key)
    rows = await replace_business_hours(session, admin.tenant_id, body)
    return [BusinessHoursPublic.model_validate(r) for r in rows]


@router.post(
    "/exceptions",
    response_model=BusinessHoursExceptionPublic,
    status_code=status.HTTP_201_CREATED,
)
async def post_exception(
    body: BusinessHoursExceptionIn,
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_admin_user),
) -> BusinessHoursExceptionPublic:
    exception = await create_exception(session, admin.tenant_id, body)
    if exception is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An exception already exists for this date",
        )
    return BusinessHoursExceptionPublic.model_validate(exception)


@router.delete("/exceptions/{exception_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_exception(
    exception_id: str,
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_admin_user),
) -> None:
    if not await delete_exception(session, admin.tenant_id, exception_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Exception not found",
        )
