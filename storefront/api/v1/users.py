"""Current user endpoints."""

from fastapi import APIRouter

from storefront.core.deps import CurrentAccount, CurrentUser, RepositoryDep, get_token_uid
from storefront.schemas.user import ProfileResponse, UserResponse, UserSync
from storefront.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def get_me(account: CurrentAccount, repo: RepositoryDep) -> ProfileResponse:
    """The caller's user record and their store, if any."""
    return await UserService(repo).get_profile(account)


@router.post("/me", response_model=UserResponse)
async def sync_me(data: UserSync, user: CurrentUser, repo: RepositoryDep) -> UserResponse:
    """Create or refresh the caller's user record after sign-in."""
    uid = get_token_uid(user)
    email = str(user.get("email") or "")
    if data.display_name is None and user.get("name"):
        data = data.model_copy(update={"display_name": str(user["name"])})
    return await UserService(repo).sync_current_user(uid, email, data)
