"""
JWT token utilities using python-jose.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, List, Tuple

from jose import jwt, JWTError

from cost_analyzer.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

ROLES_CLAIM = "roles"
NOT_BEFORE_BACKSHIFT = timedelta(seconds=5)
MIN_TOKEN_LIFETIME = timedelta(minutes=5)


def get_issuer() -> str:
    """Configured token issuer, whitespace trimmed."""
    return settings.jwt_issuer.strip()


def create_access_token(
    username: Optional[str] = None,
    subject: Optional[str] = None,
    roles: Optional[List[str]] = None,
    hours_valid: Optional[int] = None,
) -> Tuple[str, datetime]:
    """
    Create a signed JWT access token for development use.

    Args:
        username: Value for the 'username' claim (default 'devuser')
        subject: Value for the 'sub' claim (default: random UUID)
        roles: Role names stored in the 'roles' claim
        hours_valid: Token lifetime in hours; zero or negative gives
            the minimum lifetime of 5 minutes

    Returns:
        Tuple of (encoded token, expiry datetime in UTC)
    """
    if hours_valid is None:
        hours_valid = settings.dev_token_default_hours

    lifetime = timedelta(hours=hours_valid)
    if lifetime <= timedelta(0):
        lifetime = MIN_TOKEN_LIFETIME

    now = datetime.utcnow()
    expire = now + lifetime

    to_encode: Dict[str, Any] = {
        "sub": subject or str(uuid.uuid4()),
        "username": username or "devuser",
        "token_use": "access",
        "iss": get_issuer(),
        "iat": now,
        "nbf": now - NOT_BEFORE_BACKSHIFT,
        "exp": expire,
    }
    if roles:
        to_encode[ROLES_CLAIM] = list(roles)

    token = jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return token, expire


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT token.

    Checks signature, issuer and lifetime (with clock skew). Audience is
    not validated.

    Args:
        token: The JWT token string

    Returns:
        Decoded payload dict if valid, None if invalid/expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            issuer=get_issuer(),
            options={
                "verify_aud": False,
                "require_iss": True,
                "require_exp": True,
                "leeway": settings.jwt_clock_skew_seconds,
            },
        )
    except JWTError as e:
        logger.info(f"JWT auth failed: {e}")
        return None

    logger.debug(f"JWT validated. iss='{payload.get('iss')}', expected='{get_issuer()}'")
    return payload
