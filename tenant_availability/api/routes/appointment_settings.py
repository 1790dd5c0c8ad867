from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_availability.api.deps import get_admin_user, get_current_user
from tenant_availability.core.db import get_session
from tenant_availability.models.appointment_settings import (
    AppointmentSettingsIn,
    AppointmentSettingsPublic,
    AppointmentTypeIn,
    AppointmentTypePublic,
)
from tenant_availability.models.user import User
from tenant_availability.services.config_service import (
    appointment_type_in_use,
    create_appointment_type,
    delete_appointment_type,
    get_or_create_settings,
    list_appointment_types,
    update_appointment_type,
    upsert_settings,
)

router = APIRouter(tags=["appointment-settings"])


@router.get("/appointment-settings", response_model=AppointmentSettingsPublic)
async def get_settings(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AppointmentSettingsPublic:
    """Tenant appointment settings; a row with the defaults is created on first read."""
    row = await get_or_create_settings(session, current_user.tenant_id)
    return AppointmentSettingsPublic.model_validate(row)


@router.put("/appointment-settings", response_model=AppointmentSettingsPublic)
async def put_settings(
    body: AppointmentSettingsIn,
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_admin_user),
) -> AppointmentSettingsPublic:
    row = await upsert_settings(session, admin.tenant_id, body)
    return AppointmentSettingsPublic.model_validate(row)


@router.get("/appointment-types", response_model=list[AppointmentTypePublic])
async def get_types(
    active_only: bool = Query(False),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> list[AppointmentTypePublic]:
    rows = await list_appointment_types(session, current_user.tenant_id, active_only=active_only)
    return [AppointmentTypePublic.model_validate(r) for r in rows]


@router.post(
    "/appointment-types",
    response_model=AppointmentTypePublic,
    status_code=status.HTTP_201_CREATED,
)
async def post_type(
    body: AppointmentTypeIn,
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_admin_user),
) -> AppointmentTypePublic:
    row = await create_appointment_type(session, admin.tenant_id, body)
    return AppointmentTypePublic.model_validate(row)


@router.put("/appointment-types/{type_id}", response_model=AppointmentTypePublic)
async def put_type(
    type_id: str,
    body: AppointmentTypeIn,
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_admin_user),
) -> AppointmentTypePublic:
    row = await update_appointment_type(session, admin.tenant_id, type_id, body)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment type not found",
        )
    return AppointmentTypePublic.model_validate(row)


@router.delete("/appointment-types/{type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_type(
    type_id: str,
    session: AsyncSession = Depends(get_session),
    admin: User = Depends(get_admin_user),
) -> None:
    if await appointment_type_in_use(session, admin.tenant_id, type_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Appointment type is used by existing appointments",
        )
    if not await delete_appointment_type(session, admin.tenant_id, type_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment type not found",
        )
