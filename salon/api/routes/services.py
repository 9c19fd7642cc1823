from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon.api.deps import get_current_professional, get_session
from salon.models.service import ServiceCreate, ServicePublic, ServiceUpdate
from salon.models.user import User
from salon.services.catalog_service import (
    create_service,
    delete_service,
    get_service,
    list_services,
    service_to_public,
    update_service,
)

router = APIRouter(prefix="/services", tags=["services"])


@router.get("", response_model=list[ServicePublic])
async def list_active_services(session: AsyncSession = Depends(get_session)) -> list[ServicePublic]:
    return [service_to_public(s) for s in await list_services(session)]


@router.get("/admin", response_model=list[ServicePublic])
async def list_all_services(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> list[ServicePublic]:
    return [service_to_public(s) for s in await list_services(session, include_inactive=True)]


@router.get("/{service_id}", response_model=ServicePublic)
async def get_one_service(service_id: int, session: AsyncSession = Depends(get_session)) -> ServicePublic:
    service = await get_service(session, service_id)
    if not service or not service.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return service_to_public(service)


@router.post("", response_model=ServicePublic, status_code=status.HTTP_201_CREATED)
async def add_service(
    body: ServiceCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> ServicePublic:
    service = await create_service(session, body)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A service with this name already exists",
        )
    return service_to_public(service)


@router.patch("/{service_id}", response_model=ServicePublic)
async def edit_service(
    service_id: int,
    body: ServiceUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> ServicePublic:
    service = await get_service(session, service_id)
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    updated = await update_service(session, service, body)
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A service with this name already exists",
        )
    return service_to_public(updated)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_service(
    service_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_professional),
) -> None:
    if not await delete_service(session, service_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
