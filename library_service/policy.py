"""Role-based access policy.

The API layer calls ``check_access`` before dispatching to a service; the
rules live here rather than in route decorators.
"""
import enum

from library_service.exceptions import AccessDeniedError, AuthenticationError
from library_service.models.user import User, UserRole


class Action(str, enum.Enum):
    BROWSE_CATALOG = "BROWSE_CATALOG"
    VIEW_STATISTICS = "VIEW_STATISTICS"
    BORROW = "BORROW"
    RETURN = "RETURN"
    VIEW_OWN_BORROWS = "VIEW_OWN_BORROWS"
    MANAGE_BOOKS = "MANAGE_BOOKS"
    MANAGE_USERS = "MANAGE_USERS"


PUBLIC_ACTIONS = frozenset({Action.BROWSE_CATALOG, Action.VIEW_STATISTICS})

# Roles allowed per non-public action.
POLICY: dict[Action, frozenset[UserRole]] = {
    Action.BORROW: frozenset({UserRole.MEMBER, UserRole.ADMIN}),
    Action.RETURN: frozenset({UserRole.MEMBER, UserRole.ADMIN}),
    Action.VIEW_OWN_BORROWS: frozenset({UserRole.MEMBER, UserRole.ADMIN}),
    Action.MANAGE_BOOKS: frozenset({UserRole.ADMIN}),
    Action.MANAGE_USERS: frozenset({UserRole.ADMIN}),
}


def is_allowed(user: User | None, action: Action) -> bool:
    if action in PUBLIC_ACTIONS:
        return True
    if user is None:
        return False
    return user.role in POLICY.get(action, frozenset())


def check_access(user: User | None, action: Action) -> None:
    """Raise AuthenticationError for anonymous callers and AccessDeniedError
    for authenticated callers whose role does not permit ``action``."""
    if is_allowed(user, action):
        return
    if user is None:
        raise AuthenticationError("Authentication required")
    raise AccessDeniedError(f"Role '{user.role.value}' is not permitted to {action.value.lower().replace('_', ' ')}")
