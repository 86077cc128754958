"""JWT bearer authentication and policy-checked FastAPI dependencies."""
import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from library_service.database import get_db
from library_service.exceptions import AuthenticationError
from library_service.models.user import User
from library_service.policy import Action, check_access
from library_service.repositories.user import UserRepository
from library_service.security import decode_access_token

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


async def get_optional_user(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    if creds is None:
        return None
    payload = decode_access_token(creds.credentials)
    user_id = payload.get("uid")
    if not isinstance(user_id, int):
        raise AuthenticationError("Invalid or expired token", details="missing uid claim")
    user = await UserRepository(db).find_by_id(user_id)
    if user is None or user.email != payload.get("sub"):
        logger.warning("Token for unknown user id=%s rejected", user_id)
        raise AuthenticationError("Invalid or expired token", details="unknown subject")
    return user


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError("Authentication required")
    return user


def require(action: Action):
    """Dependency factory: resolves the caller and enforces the access policy."""
    async def _check(user: User | None = Depends(get_optional_user)) -> User | None:
        check_access(user, action)
        return user
    return _check
