"""Role-based access control."""

from .roles import (
    DEFAULT_ADMIN_ROLE,
    GOVERNOR_ROLE,
    MINTER_ROLE,
    RoleRegistry,
    role_id,
    role_name,
)

__all__ = [
    "DEFAULT_ADMIN_ROLE",
    "GOVERNOR_ROLE",
    "MINTER_ROLE",
    "RoleRegistry",
    "role_id",
    "role_name",
]
