import uuid
from collections.abc import AsyncGenerator

from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from renobid.common.enums import UserRole
from renobid.common.exceptions import NotFoundError, PermissionDeniedError
from renobid.common.security import decode_token
from renobid.core.bidding.service import BidService
from renobid.core.notifications.dispatcher import (
    NotificationDispatcher,
    discard_pending,
    send_pending,
)
from renobid.db.models.user import User
from renobid.db.session import async_session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            discard_pending(session)
            raise
        send_pending(session)


async def get_current_user(
    authorization: str = Header(..., description="Bearer <token>"),
    db: AsyncSession = Depends(get_db),
) -> User:
    if not authorization.startswith("Bearer "):
        raise PermissionDeniedError("Invalid authorization header format", code="UNAUTHORIZED")

    token = authorization[len("Bearer "):]
    try:
        payload = decode_token(token)
    except ValueError:
        raise PermissionDeniedError("Invalid or expired token", code="UNAUTHORIZED")

    if payload.get("type") != "access":
        raise PermissionDeniedError("Invalid token type", code="UNAUTHORIZED")

    user_id = payload.get("sub")
    try:
        user_uuid = uuid.UUID(user_id)
    except (TypeError, ValueError):
        raise PermissionDeniedError("Invalid token payload", code="UNAUTHORIZED")

    result = await db.execute(
        select(User).where(User.id == user_uuid, User.is_deleted.is_(False))
    )
    user = result.scalar_one_or_none()

    if not user:
        raise NotFoundError("User")
    if not user.is_active:
        raise PermissionDeniedError("User account is inactive")

    return user


def require_role(*roles: UserRole):
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in [r.value for r in roles]:
            raise PermissionDeniedError(
                f"This action requires one of the following roles: {', '.join(r.value for r in roles)}"
            )
        return current_user

    return role_checker


def get_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher()


def get_bid_service(
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> BidService:
    return BidService(db, dispatcher)
