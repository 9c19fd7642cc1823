from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salon.models.blocked_slot import BlockedSlot, BlockedSlotCreate


async def list_blocked_slots(
    session: AsyncSession, on_date: date | None = None, from_date: date | None = None
) -> list[BlockedSlot]:
    q = select(BlockedSlot).order_by(BlockedSlot.blocked_date, BlockedSlot.blocked_time)
    if on_date:
        q = q.where(BlockedSlot.blocked_date == on_date)
    elif from_date:
        q = q.where(BlockedSlot.blocked_date >= from_date)
    result = await session.execute(q)
    return list(result.scalars().all())


async def create_blocked_slot(session: AsyncSession, data: BlockedSlotCreate) -> BlockedSlot | None:
    """Block a time on a date. Returns None if that time is already blocked."""
    result = await session.execute(
        select(BlockedSlot).where(
            BlockedSlot.blocked_date == data.blocked_date,
            BlockedSlot.blocked_time == data.blocked_time,
        )
    )
    if result.scalar_one_or_none():
        return None
    blocked = BlockedSlot(**data.model_dump())
    session.add(blocked)
    await session.flush()
    await session.refresh(blocked)
    return blocked


async def delete_blocked_slot(session: AsyncSession, blocked_slot_id: int) -> bool:
    blocked = await session.get(BlockedSlot, blocked_slot_id)
    if not blocked:
        return False
    await session.delete(blocked)
    await session.flush()
    return True
