from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon.api.deps import get_current_professional, get_session
from salon.models.announcement import (
    Announcement,
    AnnouncementCreate,
    AnnouncementPublic,
    AnnouncementUpdate,
)
from salon.models.user import User
from salon.services.announcement_service import (
    create_announcement,
    delete_announcement,
    list_announcements,
    update_announcement,
)

router = APIRouter(prefix="/announcements", tags=["announcements"])


def _to_public(a: Announcement) -> AnnouncementPublic:
    return AnnouncementPublic.model_validate(a, from_attributes=True)


@router.get("", response_model=list[AnnouncementPublic])
async def list_active_announcements(session: AsyncSession = Depends(get_session)) -> list[AnnouncementPublic]:
    return [_to_public(a) for a in await list_announcements(session)]


@router.get("/admin", response_model=list[AnnouncementPublic])
async def list_all_announcements(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> list[AnnouncementPublic]:
    return [_to_public(a) for a in await list_announcements(session, include_inactive=True)]


@router.post("", response_model=AnnouncementPublic, status_code=status.HTTP_201_CREATED)
async def add_announcement(
    body: AnnouncementCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> AnnouncementPublic:
    return _to_public(await create_announcement(session, body))


@router.patch("/{announcement_id}", response_model=AnnouncementPublic)
async def edit_announcement(
    announcement_id: int,
    body: AnnouncementUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> AnnouncementPublic:
    announcement = await update_announcement(session, announcement_id, body)
    if not announcement:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    return _to_public(announcement)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_announcement(
    announcement_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> None:
    if not await delete_announcement(session, announcement_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
