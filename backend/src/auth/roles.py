"""User roles for the document service.

Role Hierarchy (descending permissions):
- ADMIN: Reviewer capability. Reviews, lists and deletes any document.
- USER: Uploads documents and manages only their own.
"""

from enum import Enum


class UserRole(str, Enum):
    """User roles carried in the token 'role' claim."""
    ADMIN = "ADMIN"
    USER = "USER"


# Role hierarchy: Each role includes permissions of all roles below it
ROLE_HIERARCHY = {
    UserRole.ADMIN: {UserRole.ADMIN, UserRole.USER},
    UserRole.USER: {UserRole.USER},
}

REVIEWER_ROLE = UserRole.ADMIN


def has_permission(user_role: UserRole, required_role: UserRole) -> bool:
    """Check if a user role has permission to perform an action requiring a specific role.

    Examples:
        >>> has_permission(UserRole.ADMIN, UserRole.USER)
        True
        >>> has_permission(UserRole.USER, UserRole.ADMIN)
        False
    """
    return required_role in ROLE_HIERARCHY.get(user_role, set())


def has_reviewer_capability(user_role: UserRole) -> bool:
    """True when the role may review documents owned by anyone."""
    return has_permission(user_role, REVIEWER_ROLE)
