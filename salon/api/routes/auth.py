import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon.api.deps import get_current_user, refresh_header
from salon.api.schemas.auth import (
    EmailCheckRequest,
    EmailCheckResponse,
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileUpdateRequest,
    RefreshRequest,
    SignupRequest,
    TokenPair,
)
from salon.core.db import get_session
from salon.core.security import create_password_reset_token, decode_refresh_token
from salon.models.user import User, UserCreate, UserPublic, UserUpdate
from salon.services.auth_service import (
    email_exists,
    get_user_by_email,
    login_user,
    refresh_tokens,
    reset_password,
    revoke_refresh_token,
    signup_user,
    update_user_profile,
    user_to_public,
)
from salon.services.email_service import send_password_reset_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenPair)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> TokenPair:
    pair = await login_user(session, body.email, body.password)
    if not pair:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    user, access, refresh, expires_in = pair
    return TokenPair(
        access_token=access,
        refresh_token=refresh,
        expires_in=expires_in,
    )


@router.post("/signup", response_model=TokenPair)
async def signup(
    body: SignupRequest,
    session: AsyncSession = Depends(get_session),
) -> TokenPair:
    pair = await signup_user(
        session,
        UserCreate(
            email=body.email,
            password=body.password,
            full_name=body.full_name.strip(),
            phone=body.phone.strip(),
        ),
    )
    if not pair:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )
    user, access, refresh, expires_in = pair
    logger.info("New %s account: user_id=%s", user.role, user.id)
    return TokenPair(
        access_token=access,
        refresh_token=refresh,
        expires_in=expires_in,
    )


@router.post("/refresh", response_model=TokenPair)
async def refresh(
    session: AsyncSession = Depends(get_session),
    x_refresh_token: str | None = Depends(refresh_header),
    body: RefreshRequest | None = None,
) -> TokenPair:
    token = x_refresh_token or (body.refresh_token if body else None)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token required (header X-Refresh-Token or body refresh_token)",
        )
    pair = await refresh_tokens(session, token)
    if not pair:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )
    user, access, refresh, expires_in = pair
    return TokenPair(
        access_token=access,
        refresh_token=refresh,
        expires_in=expires_in,
    )


@router.post("/logout")
async def logout(
    session: AsyncSession = Depends(get_session),
    x_refresh_token: str | None = Depends(refresh_header),
    body: RefreshRequest | None = None,
) -> dict:
    token = x_refresh_token or (body.refresh_token if body else None)
    if token:
        _, jti = decode_refresh_token(token)
        if jti:
            await revoke_refresh_token(session, jti)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserPublic)
async def me(current_user: User = Depends(get_current_user)) -> UserPublic:
    return user_to_public(current_user)


@router.patch("/me", response_model=UserPublic)
async def update_me(
    body: ProfileUpdateRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> UserPublic:
    user = await update_user_profile(
        session, current_user, UserUpdate(**body.model_dump(exclude_unset=True))
    )
    return user_to_public(user)


@router.post("/check-email", response_model=EmailCheckResponse)
async def check_email(
    body: EmailCheckRequest,
    session: AsyncSession = Depends(get_session),
) -> EmailCheckResponse:
    return EmailCheckResponse(exists=await email_exists(session, body.email))


@router.post("/password-reset", status_code=status.HTTP_202_ACCEPTED)
async def request_password_reset(
    body: PasswordResetRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Email a reset link. Same response whether or not the account exists."""
    user = await get_user_by_email(session, body.email)
    if user:
        background_tasks.add_task(
            send_password_reset_email,
            to_email=user.email,
            recipient_name=user.full_name,
            token=create_password_reset_token(user.id, user.hashed_password),
        )
    else:
        logger.info("Password reset requested for unknown email")
    return {"message": "If the email is registered, a reset link has been sent"}


@router.post("/password-reset/confirm")
async def confirm_password_reset(
    body: PasswordResetConfirm,
    session: AsyncSession = Depends(get_session),
) -> dict:
    user = await reset_password(session, body.token, body.new_password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token",
        )
    return {"message": "Password updated"}
