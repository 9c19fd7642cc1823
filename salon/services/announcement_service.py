from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salon.models.announcement import Announcement, AnnouncementCreate, AnnouncementUpdate


async def list_announcements(session: AsyncSession, include_inactive: bool = False) -> list[Announcement]:
    q = select(Announcement).order_by(Announcement.created_at.desc(), Announcement.id.desc())
    if not include_inactive:
        q = q.where(Announcement.is_active == True)  # noqa: E712
    result = await session.execute(q)
    return list(result.scalars().all())


async def create_announcement(session: AsyncSession, data: AnnouncementCreate) -> Announcement:
    announcement = Announcement(**data.model_dump())
    session.add(announcement)
    await session.flush()
    await session.refresh(announcement)
    return announcement


async def update_announcement(
    session: AsyncSession, announcement_id: int, data: AnnouncementUpdate
) -> Announcement | None:
    announcement = await session.get(Announcement, announcement_id)
    if not announcement:
        return None
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(announcement, key, value)
    session.add(announcement)
    await session.flush()
    await session.refresh(announcement)
    return announcement


async def delete_announcement(session: AsyncSession, announcement_id: int) -> bool:
    announcement = await session.get(Announcement, announcement_id)
    if not announcement:
        return False
    await session.delete(announcement)
    await session.flush()
    return True
