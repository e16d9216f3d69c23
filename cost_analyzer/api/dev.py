"""
Development authentication endpoints.

Issues signed access tokens and echoes back what the API sees in them.
Mounted only when settings.enable_dev_endpoints is true.
"""

import logging
from datetime import datetime
from typing import Optional, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from pydantic.alias_generators import to_pascal

from cost_analyzer.auth.dependencies import Principal, get_current_principal
from cost_analyzer.auth.jwt import create_access_token, ROLES_CLAIM

logger = logging.getLogger(__name__)

router = APIRouter()


class TokenRequest(BaseModel):
    """Claims to put in a development token."""

    username: Optional[str] = None
    sub: Optional[str] = None
    roles: Optional[List[str]] = None
    hours_valid: Optional[int] = None

    class Config:
        alias_generator = to_pascal
        populate_by_name = True


class TokenResponse(BaseModel):
    token: str
    expiresUtc: datetime


class ClaimResponse(BaseModel):
    Type: str
    Value: str


class AuthInfoResponse(BaseModel):
    roleClaimType: str
    roles: List[str]
    isAdmin: bool


def flatten_claims(claims: dict) -> List[ClaimResponse]:
    """Expand list-valued claims into one entry per value."""
    flat = []
    for claim_type, value in claims.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            flat.append(ClaimResponse(Type=claim_type, Value=str(item)))
    return flat


@router.post("/token", response_model=TokenResponse)
async def issue_token(request: TokenRequest):
    """Issue a signed access token for local development."""
    token, expires = create_access_token(
        username=request.username,
        subject=request.sub,
        roles=request.roles,
        hours_valid=request.hours_valid,
    )
    logger.info(f"Issued dev token for {request.username or 'devuser'} expiring {expires.isoformat()}")
    return TokenResponse(token=token, expiresUtc=expires)


@router.get("/claims", response_model=List[ClaimResponse])
async def debug_claims(principal: Principal = Depends(get_current_principal)):
    """List the claims of the caller's token."""
    return flatten_claims(principal.claims)


@router.get("/auth", response_model=AuthInfoResponse)
async def debug_auth(principal: Principal = Depends(get_current_principal)):
    """Show which roles the API resolved for the caller."""
    return AuthInfoResponse(
        roleClaimType=ROLES_CLAIM,
        roles=principal.roles,
        isAdmin=principal.is_admin,
    )
