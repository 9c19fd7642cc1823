import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon.api.deps import get_current_professional, get_session
from salon.models.blocked_slot import BlockedSlotCreate, BlockedSlotPublic
from salon.models.user import User
from salon.services.blocked_slot_service import (
    create_blocked_slot,
    delete_blocked_slot,
    list_blocked_slots,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/blocked-slots", tags=["blocked-slots"])


@router.get("", response_model=list[BlockedSlotPublic])
async def list_blocked(
    date_param: date | None = Query(None, alias="date"),
    from_date: date | None = Query(None, alias="from_date"),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> list[BlockedSlotPublic]:
    blocked = await list_blocked_slots(session, on_date=date_param, from_date=from_date)
    return [BlockedSlotPublic.model_validate(b, from_attributes=True) for b in blocked]


@router.post("", response_model=BlockedSlotPublic, status_code=status.HTTP_201_CREATED)
async def block_slot(
    body: BlockedSlotCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> BlockedSlotPublic:
    blocked = await create_blocked_slot(session, body)
    if not blocked:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This time is already blocked",
        )
    logger.info("Blocked %s %s (%s)", blocked.blocked_date, blocked.blocked_time, blocked.reason or "no reason")
    return BlockedSlotPublic.model_validate(blocked, from_attributes=True)


@router.delete("/{blocked_slot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unblock_slot(
    blocked_slot_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> None:
    if not await delete_blocked_slot(session, blocked_slot_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blocked slot not found")
