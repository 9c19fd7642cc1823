import logging
from datetime import date, datetime

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon.api.deps import get_current_professional, get_current_user, get_now, get_session
from salon.api.schemas.appointment import AppointmentStatusUpdate, BookAppointmentRequest
from salon.core.scheduling import parse_duration
from salon.models.appointment import Appointment, AppointmentCreate, AppointmentPublic
from salon.models.user import User
from salon.services.appointment_service import (
    BookingRejected,
    cancel_appointment,
    create_appointment,
    list_all_appointments,
    list_appointments_for_user,
    update_appointment_status,
)
from salon.services.calendar_service import push_calendar_event
from salon.services.catalog_service import get_service_by_name
from salon.services.email_service import (
    send_appointment_confirmation_email,
    send_professional_notification_email,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])


def _to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic.model_validate(a, from_attributes=True)


@router.post("", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> AppointmentPublic:
    client_name = body.client_name or current_user.full_name
    client_phone = body.client_phone or current_user.phone
    if not client_name or not client_phone:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Client name and phone are required",
        )
    data = AppointmentCreate(
        service_id=body.service_id,
        appointment_date=body.appointment_date,
        appointment_time=body.appointment_time,
        client_name=client_name.strip(),
        client_email=str(body.client_email or current_user.email),
        client_phone=client_phone.strip(),
        observations=body.observations,
    )
    try:
        appointment = await create_appointment(session, current_user.id, data, now=now)
    except BookingRejected as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    public = _to_public(appointment)
    service = await get_service_by_name(session, appointment.service)
    duration_minutes = parse_duration(service.duration) if service else 0
    background_tasks.add_task(send_appointment_confirmation_email, public)
    background_tasks.add_task(send_professional_notification_email, public)
    background_tasks.add_task(push_calendar_event, public, duration_minutes)
    return public


@router.get("", response_model=list[AppointmentPublic])
async def list_my_appointments(
    from_date: date | None = Query(None, alias="from_date"),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> list[AppointmentPublic]:
    appointments = await list_appointments_for_user(session, current_user.id, from_date=from_date)
    return [_to_public(a) for a in appointments]


@router.get("/admin", response_model=list[AppointmentPublic])
async def list_all_appointments_admin(
    date_param: date | None = Query(None, alias="date"),
    status_param: str | None = Query(None, alias="status"),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> list[AppointmentPublic]:
    """Admin endpoint: all appointments, optionally for one date and/or status."""
    appointments = await list_all_appointments(session, on_date=date_param, status=status_param)
    return [_to_public(a) for a in appointments]


@router.patch("/{appointment_id}/status", response_model=AppointmentPublic)
async def set_appointment_status(
    appointment_id: int,
    body: AppointmentStatusUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> AppointmentPublic:
    try:
        appointment = await update_appointment_status(session, appointment_id, body.status)
    except BookingRejected as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found",
        )
    logger.info("Appointment %s set to %s by user %s", appointment_id, body.status, current_user.id)
    return _to_public(appointment)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_my_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    ok = await cancel_appointment(session, appointment_id, current_user.id)
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found or not yours",
        )
