from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from library_service.api.deps import get_user_service
from library_service.middleware.auth import get_current_user
from library_service.models.user import User
from library_service.schemas.user import AuthResponse, LoginRequest, UserRegistrationRequest, UserResponse
from library_service.security import create_access_token
from library_service.services.users import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(request: UserRegistrationRequest, users: UserService = Depends(get_user_service)):
    return await users.register(request)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, users: UserService = Depends(get_user_service)):
    user = await users.authenticate(request.email, request.password)
    now = datetime.now(timezone.utc)
    token, expires_at = create_access_token(user, now)
    return AuthResponse(
        token=token,
        email=user.email,
        role=user.role,
        expires_in=int((expires_at - now).total_seconds()),
    )


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return user
