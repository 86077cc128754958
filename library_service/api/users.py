from fastapi import APIRouter, Depends

from library_service.api.deps import get_user_service
from library_service.middleware.auth import require
from library_service.models.user import User, UserRole
from library_service.policy import Action
from library_service.schemas.user import UserResponse, UserUpdateRequest
from library_service.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])

_admin = require(Action.MANAGE_USERS)


@router.get("", response_model=list[UserResponse])
async def members(admin: User = Depends(_admin), users: UserService = Depends(get_user_service)):
    return await users.find_all_members()


@router.get("/search", response_model=list[UserResponse])
async def search(
    first_name: str | None = None,
    last_name: str | None = None,
    admin: User = Depends(_admin),
    users: UserService = Depends(get_user_service),
):
    return await users.search_users_by_name(first_name, last_name)


@router.get("/count", response_model=int)
async def count_all(admin: User = Depends(_admin), users: UserService = Depends(get_user_service)):
    return await users.count_all_users()


@router.get("/count/{role}", response_model=int)
async def count_by_role(
    role: UserRole,
    admin: User = Depends(_admin),
    users: UserService = Depends(get_user_service),
):
    return await users.count_users_by_role(role)


@router.get("/role/{role}", response_model=list[UserResponse])
async def by_role(
    role: UserRole,
    admin: User = Depends(_admin),
    users: UserService = Depends(get_user_service),
):
    return await users.find_users_by_role(role)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, admin: User = Depends(_admin), users: UserService = Depends(get_user_service)):
    return await users.get(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    request: UserUpdateRequest,
    admin: User = Depends(_admin),
    users: UserService = Depends(get_user_service),
):
    return await users.update_user(user_id, request)
