"""Dependency injection for FastAPI routes."""

from collections.abc import AsyncGenerator
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status

# Re-export auth dependencies for convenience
from storefront.core.auth import CurrentUser, get_current_user
from storefront.core.config import settings
from storefront.core.database import async_session_maker
from storefront.models.user import Role
from storefront.repositories import DocumentRepository, Repository, SqlRepository
from storefront.schemas.user import UserResponse
from storefront.services.email_service import EmailService
from storefront.services.notification_service import NotificationService


async def get_repository() -> AsyncGenerator[Repository, None]:
    """Yield the repository for the configured storage backend.

    The SQL backend gets one session per request; the JSON backend is
    stateless apart from its module-level file locks.
    """
    if settings.storage_backend == "json":
        yield DocumentRepository(settings.data_dir)
        return

    async with async_session_maker() as session:
        yield SqlRepository(session)


RepositoryDep = Annotated[Repository, Depends(get_repository)]


def get_token_uid(user: dict[str, Any]) -> str:
    """Extract the auth uid from a verified token payload."""
    uid = user.get("sub") or user.get("user_id")
    if not uid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return str(uid)


async def get_account(user: CurrentUser, repo: RepositoryDep) -> UserResponse:
    """Load the caller's user record.

    Callers who have signed in but never synced their profile are treated
    as plain users.
    """
    uid = get_token_uid(user)
    account = await repo.get_user(uid)
    if account is None:
        return UserResponse(
            id=uid,
            email=str(user.get("email") or ""),
            display_name=str(user.get("name") or ""),
            role=Role.USER,
        )
    return account


async def get_admin_account(
    account: Annotated[UserResponse, Depends(get_account)],
) -> UserResponse:
    """Require the caller to be an admin."""
    if account.role is not Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return account


CurrentAccount = Annotated[UserResponse, Depends(get_account)]
AdminAccount = Annotated[UserResponse, Depends(get_admin_account)]


def get_email_service() -> EmailService:
    return EmailService()


def get_notification_service(
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> NotificationService:
    return NotificationService(email_service)


Notifications = Annotated[NotificationService, Depends(get_notification_service)]


__all__ = [
    "AdminAccount",
    "CurrentAccount",
    "CurrentUser",
    "Notifications",
    "RepositoryDep",
    "get_account",
    "get_admin_account",
    "get_current_user",
    "get_email_service",
    "get_notification_service",
    "get_repository",
    "get_token_uid",
]
