"""
Authentication and authorization module.
"""

from cost_analyzer.auth.jwt import create_access_token, decode_token
from cost_analyzer.auth.dependencies import (
    ADMIN_ROLE,
    Principal,
    get_current_principal,
    get_current_principal_optional,
    require_admin,
)

__all__ = [
    "create_access_token",
    "decode_token",
    "ADMIN_ROLE",
    "Principal",
    "get_current_principal",
    "get_current_principal_optional",
    "require_admin",
]
