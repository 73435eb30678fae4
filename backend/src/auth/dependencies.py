"""FastAPI dependencies for authentication and authorization.

This module provides dependency injection functions for:
- Extracting and validating JWT tokens from requests
- Building the current caller from token claims
- Enforcing reviewer capability on review endpoints

Usage:
    @router.get("/my-documents")
    def list_mine(user: CurrentUser = Depends(get_current_user)):
        ...

    @router.put("/{document_id}/status")
    def review(user: CurrentUser = Depends(require_reviewer)):
        ...
"""

from dataclasses import dataclass
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt

from .jwt import decode_token
from .roles import UserRole, has_reviewer_capability


# HTTP Bearer token security scheme
security = HTTPBearer()


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller as described by the token claims."""
    user_id: str
    role: UserRole

    @property
    def is_reviewer(self) -> bool:
        return has_reviewer_capability(self.role)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """Extract and validate the JWT token, returning the caller.

    Raises:
        HTTPException 401: If token is missing, invalid, expired, or lacks claims
    """
    token = credentials.credentials

    try:
        payload = decode_token(token)

        user_id = payload.get("sub")
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token: missing user ID claim",
                headers={"WWW-Authenticate": "Bearer"},
            )

        role = UserRole(payload.get("role", UserRole.USER.value))

    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return CurrentUser(user_id=str(user_id), role=role)


def require_reviewer(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency for endpoints that need reviewer capability.

    Raises:
        HTTPException 403: If the caller is not a reviewer
    """
    if not current_user.is_reviewer:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions. Reviewer capability required",
        )
    return current_user
