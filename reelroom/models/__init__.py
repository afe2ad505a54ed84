from reelroom.core.database import Base
from reelroom.models.users import (
    AccessCode,
    Permission,
    Role,
    User,
    role_permissions,
)

__all__ = [
    "AccessCode",
    "Base",
    "Permission",
    "Role",
    "User",
    "role_permissions",
]
