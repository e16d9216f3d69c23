"""
FastAPI dependencies for authentication and authorization.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from fastapi import Depends, HTTPException, status, Request

from cost_analyzer.auth.jwt import decode_token, ROLES_CLAIM

ADMIN_ROLE = "Admin"


@dataclass
class Principal:
    """The caller identified by a validated access token."""

    subject: str
    username: Optional[str]
    roles: List[str] = field(default_factory=list)
    claims: Dict[str, Any] = field(default_factory=dict)

    def is_in_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return self.is_in_role(ADMIN_ROLE)


def get_token_from_request(request: Request) -> Optional[str]:
    """
    Extract JWT token from request.

    Checks in order:
    1. Authorization header (Bearer token)
    2. access_token cookie

    Returns:
        Token string if found, None otherwise
    """
    # Check Authorization header
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]  # Remove "Bearer " prefix

    # Check cookie
    token = request.cookies.get("access_token")
    return token


def principal_from_payload(payload: Dict[str, Any]) -> Optional[Principal]:
    """Build a Principal from a decoded token, None if it is not an access token."""
    if payload.get("token_use") != "access":
        return None

    subject = payload.get("sub")
    if not subject:
        return None

    roles = payload.get(ROLES_CLAIM) or []
    if isinstance(roles, str):
        roles = [roles]

    return Principal(
        subject=subject,
        username=payload.get("username"),
        roles=list(roles),
        claims=payload,
    )


async def get_current_principal_optional(request: Request) -> Optional[Principal]:
    """
    Get the current caller if authenticated, None otherwise.

    Use this for routes that work both with and without authentication.
    """
    token = get_token_from_request(request)
    if not token:
        return None

    payload = decode_token(token)
    if not payload:
        return None

    return principal_from_payload(payload)


async def get_current_principal(request: Request) -> Principal:
    """
    Get the current authenticated caller.

    Raises HTTPException 401 if not authenticated.
    """
    principal = await get_current_principal_optional(request)

    if not principal:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return principal


async def require_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """
    Require the current caller to hold the Admin role.

    Raises HTTPException 403 otherwise.
    """
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )

    return principal
