"""User registry: profile sync and role assignment."""

import logging

from storefront.core.config import settings
from storefront.models.user import Role
from storefront.repositories import Repository
from storefront.schemas.user import ProfileResponse, UserResponse, UserSync

logger = logging.getLogger(__name__)


def is_admin_email(email: str | None) -> bool:
    if not email:
        return False
    return email.strip().lower() in {e.strip().lower() for e in settings.admin_emails}


class UserService:
    """Business logic for user records keyed by the auth uid."""

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    async def sync_current_user(self, uid: str, email: str, data: UserSync) -> UserResponse:
        """Create or refresh the caller's record after sign-in.

        New users start as ``user`` unless their email is an admin email.
        An existing role is only ever raised to admin, never lowered.
        """
        existing = await self.repo.get_user(uid)
        fields: dict[str, object] = {"email": email}
        if data.display_name is not None:
            fields["display_name"] = data.display_name

        if existing is None:
            role = Role.ADMIN if is_admin_email(email) else Role.USER
            fields["role"] = role
            logger.info("Registering user %s as %s", uid, role.value)
        elif existing.role is not Role.ADMIN and is_admin_email(email):
            fields["role"] = Role.ADMIN
            logger.info("Promoting user %s to admin", uid)

        return await self.repo.upsert_user(uid, fields)

    async def get_profile(self, account: UserResponse) -> ProfileResponse:
        store = await self.repo.get_store_by_owner(account.id)
        return ProfileResponse(user=account, store=store)

    async def list_users(self) -> list[UserResponse]:
        return await self.repo.list_users()
