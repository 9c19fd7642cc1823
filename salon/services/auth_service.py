from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from salon.core.config import settings
from salon.core.security import (
    create_access_token,
    create_refresh_token,
    decode_password_reset_token,
    decode_refresh_token,
    hash_password,
    password_fingerprint,
    verify_password,
)
from salon.models.refresh_token import RefreshToken
from salon.models.user import ROLE_CLIENT, ROLE_PROFESSIONAL, User, UserCreate, UserPublic, UserUpdate


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == _normalize_email(email)))
    return result.scalar_one_or_none()


async def email_exists(session: AsyncSession, email: str) -> bool:
    return await get_user_by_email(session, email) is not None


def role_for_email(email: str) -> str:
    if _normalize_email(email) in settings.admin_emails_list:
        return ROLE_PROFESSIONAL
    return ROLE_CLIENT


async def create_user(session: AsyncSession, data: UserCreate) -> User:
    user = User(
        email=_normalize_email(data.email),
        full_name=data.full_name,
        phone=data.phone,
        role=role_for_email(data.email),
        hashed_password=hash_password(data.password),
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


async def update_user_profile(session: AsyncSession, user: User, data: UserUpdate) -> User:
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


def user_to_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        phone=user.phone,
        role=user.role,
    )


def make_token_pair(user_id: int) -> tuple[str, str, int]:
    access = create_access_token(user_id)
    refresh = create_refresh_token(user_id)
    expires_in = settings.access_token_expire_minutes * 60
    return access, refresh, expires_in


def _utc_naive() -> datetime:
    """Naive UTC datetime for DB columns that are TIMESTAMP WITHOUT TIME ZONE."""
    return datetime.now(UTC).replace(tzinfo=None)


async def store_refresh_token(
    session: AsyncSession, user_id: int, refresh_token: str
) -> None:
    user_id_str, jti = decode_refresh_token(refresh_token)
    if not user_id_str or not jti:
        return
    expires_at = _utc_naive() + timedelta(days=settings.refresh_token_expire_days)
    token_row = RefreshToken(user_id=user_id, jti=jti, expires_at=expires_at)
    session.add(token_row)
    await session.flush()


async def login_user(
    session: AsyncSession, email: str, password: str
) -> tuple[User, str, str, int] | None:
    user = await get_user_by_email(session, email)
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    access, refresh, expires_in = make_token_pair(user.id)
    await store_refresh_token(session, user_id=user.id, refresh_token=refresh)
    return user, access, refresh, expires_in


async def signup_user(
    session: AsyncSession, data: UserCreate
) -> tuple[User, str, str, int] | None:
    existing = await get_user_by_email(session, data.email)
    if existing:
        return None
    user = await create_user(session, data)
    access, refresh, expires_in = make_token_pair(user.id)
    await store_refresh_token(session, user_id=user.id, refresh_token=refresh)
    return user, access, refresh, expires_in


async def revoke_refresh_token(session: AsyncSession, jti: str) -> None:
    result = await session.execute(select(RefreshToken).where(RefreshToken.jti == jti))
    row = result.scalar_one_or_none()
    if row:
        row.revoked = True
        session.add(row)


async def revoke_all_refresh_tokens(session: AsyncSession, user_id: int) -> None:
    await session.execute(
        update(RefreshToken).where(RefreshToken.user_id == user_id).values(revoked=True)
    )


async def refresh_tokens(
    session: AsyncSession, refresh_token: str
) -> tuple[User, str, str, int] | None:
    user_id_str, jti = decode_refresh_token(refresh_token)
    if not user_id_str or not jti:
        return None
    result = await session.execute(
        select(RefreshToken).where(
            RefreshToken.jti == jti,
            RefreshToken.revoked == False,  # noqa: E712
            RefreshToken.expires_at > _utc_naive(),
        )
    )
    token_row = result.scalar_one_or_none()
    if not token_row:
        return None
    result = await session.execute(select(User).where(User.id == int(user_id_str)))
    user = result.scalar_one_or_none()
    if not user:
        return None
    token_row.revoked = True
    session.add(token_row)
    access, refresh, expires_in = make_token_pair(user.id)
    await store_refresh_token(session, user_id=user.id, refresh_token=refresh)
    return user, access, refresh, expires_in


async def reset_password(session: AsyncSession, token: str, new_password: str) -> User | None:
    """Set a new password from a reset token and sign the user out everywhere."""
    user_id_str, fingerprint = decode_password_reset_token(token)
    if not user_id_str or not fingerprint:
        return None
    result = await session.execute(select(User).where(User.id == int(user_id_str)))
    user = result.scalar_one_or_none()
    if not user or fingerprint != password_fingerprint(user.hashed_password):
        return None
    user.hashed_password = hash_password(new_password)
    session.add(user)
    await revoke_all_refresh_tokens(session, user.id)
    await session.flush()
    return user


async def delete_stale_refresh_tokens(session: AsyncSession) -> int:
    """Delete refresh tokens that are expired or revoked. Returns count deleted."""
    result = await session.execute(
        delete(RefreshToken).where(
            or_(RefreshToken.expires_at < _utc_naive(), RefreshToken.revoked == True)  # noqa: E712
        )
    )
    await session.flush()
    return result.rowcount or 0
