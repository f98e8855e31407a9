"""Role-based access rules shared by the services."""

from typing import assert_never

from storefront.core.exceptions import PermissionDenied
from storefront.models.user import Role
from storefront.schemas.store import StoreResponse
from storefront.schemas.user import UserResponse


def can_manage_store(user: UserResponse, store_id: str | None) -> bool:
    """Whether ``user`` may change the catalog and orders of ``store_id``.

    Admins manage every store; sellers only the store they own.
    """
    match user.role:
        case Role.ADMIN:
            return True
        case Role.SELLER:
            return store_id is not None and user.store_id == store_id
        case Role.USER:
            return False
        case _:
            assert_never(user.role)


def can_edit_store_profile(user: UserResponse, store: StoreResponse) -> bool:
    """Admins and the owner (whatever their role) may edit store settings."""
    return user.role is Role.ADMIN or store.owner_uid == user.id


def require_store_manager(user: UserResponse, store_id: str | None) -> None:
    if not can_manage_store(user, store_id):
        raise PermissionDenied(
            "You do not have permission to manage this store",
            {"store_id": store_id},
        )


def require_role(user: UserResponse, *roles: Role) -> None:
    if user.role not in roles:
        raise PermissionDenied(
            f"This action requires one of the roles: {', '.join(r.value for r in roles)}"
        )
