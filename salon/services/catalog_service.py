from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from salon.core.scheduling import parse_duration
from salon.models.appointment import Appointment
from salon.models.service import Service, ServiceCreate, ServicePublic, ServiceUpdate


def service_to_public(service: Service) -> ServicePublic:
    return ServicePublic(
        **service.model_dump(),
        duration_minutes=parse_duration(service.duration),
    )


async def list_services(session: AsyncSession, include_inactive: bool = False) -> list[Service]:
    q = select(Service).order_by(Service.display_order, Service.name)
    if not include_inactive:
        q = q.where(Service.is_active == True)  # noqa: E712
    result = await session.execute(q)
    return list(result.scalars().all())


async def get_service(session: AsyncSession, service_id: int) -> Service | None:
    return await session.get(Service, service_id)


async def get_service_by_name(session: AsyncSession, name: str) -> Service | None:
    result = await session.execute(select(Service).where(Service.name == name))
    return result.scalar_one_or_none()


async def get_duration_lookup(session: AsyncSession) -> dict[str, str]:
    """Service name -> duration text, inactive services included.

    Existing appointments may reference a service that was since deactivated,
    and its time must still be blocked.
    """
    result = await session.execute(select(Service.name, Service.duration))
    return {name: duration for name, duration in result.all()}


async def create_service(session: AsyncSession, data: ServiceCreate) -> Service | None:
    if await get_service_by_name(session, data.name):
        return None
    service = Service(**data.model_dump())
    session.add(service)
    await session.flush()
    await session.refresh(service)
    return service


async def update_service(
    session: AsyncSession, service: Service, data: ServiceUpdate
) -> Service | None:
    """Apply changes. A rename carries existing appointments over to the new name."""
    changes = data.model_dump(exclude_unset=True)
    old_name = service.name
    new_name = changes.get("name")
    renamed = bool(new_name) and new_name != old_name
    if renamed and await get_service_by_name(session, new_name):
        return None
    if renamed:
        await session.execute(
            update(Appointment).where(Appointment.service == old_name).values(service=new_name)
        )
    for key, value in changes.items():
        setattr(service, key, value)
    session.add(service)
    await session.flush()
    await session.refresh(service)
    return service


async def delete_service(session: AsyncSession, service_id: int) -> bool:
    service = await get_service(session, service_id)
    if not service:
        return False
    await session.delete(service)
    await session.flush()
    return True
