from datetime import date, datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from salon.api.deps import get_now, get_session
from salon.api.schemas.appointment import AvailableHoursResponse
from salon.services.slot_service import get_available_hours, is_closed_day

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/available", response_model=AvailableHoursResponse)
async def available_hours(
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> AvailableHoursResponse:
    """Start times (HH:MM, salon local time) still bookable on the given date."""
    result = await get_available_hours(session, date_param, now=now)
    return AvailableHoursResponse(
        date=date_param.isoformat(),
        closed=is_closed_day(date_param),
        hours=result.as_strings(),
        warnings=result.warnings,
    )
