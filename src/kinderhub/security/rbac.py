"""Role-based access control for kinderhub.

Permissions are granted through roles. Roles are stored (so administrators
can change their permission sets) and seeded at startup from
``DEFAULT_ROLES``:

- System roles (``system_admin``, ``system_user``) are assigned to users
- School roles (``school_admin``, ``school_teacher``, ``school_parent``) are
  assigned to school members, either explicitly or through the scheme flags
- ``kid_guardian`` is held by the active guardians of a kid
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from kinderhub.model import Role


class Permission(str, Enum):
    """Permissions checked by the application services."""

    # System
    MANAGE_SYSTEM = "manage_system"
    MANAGE_ROLES = "manage_roles"
    EDIT_OTHER_USERS = "edit_other_users"
    CREATE_SCHOOL = "create_school"

    # School
    MANAGE_SCHOOL = "manage_school"
    VIEW_SCHOOL = "view_school"
    MANAGE_CLASS = "manage_class"
    CREATE_KID = "create_kid"

    # Kid
    MANAGE_KID = "manage_kid"
    VIEW_KID = "view_kid"

    # Emoji and reactions
    CREATE_EMOJIS = "create_emojis"
    DELETE_EMOJIS = "delete_emojis"
    DELETE_OTHERS_EMOJIS = "delete_others_emojis"
    ADD_REACTION = "add_reaction"
    REMOVE_REACTION = "remove_reaction"


class RoleName(str, Enum):
    """Built-in role names."""

    SYSTEM_ADMIN = "system_admin"
    SYSTEM_USER = "system_user"
    SCHOOL_ADMIN = "school_admin"
    SCHOOL_TEACHER = "school_teacher"
    SCHOOL_PARENT = "school_parent"
    KID_GUARDIAN = "kid_guardian"


# Permission sets of the built-in roles
ROLE_PERMISSIONS: dict[str, set[Permission]] = {
    RoleName.SYSTEM_ADMIN.value: set(Permission),
    RoleName.SYSTEM_USER.value: {
        Permission.CREATE_SCHOOL,
        Permission.CREATE_EMOJIS,
        Permission.DELETE_EMOJIS,
        Permission.ADD_REACTION,
        Permission.REMOVE_REACTION,
    },
    RoleName.SCHOOL_ADMIN.value: {
        Permission.MANAGE_SCHOOL,
        Permission.VIEW_SCHOOL,
        Permission.MANAGE_CLASS,
        Permission.CREATE_KID,
        Permission.MANAGE_KID,
        Permission.VIEW_KID,
    },
    RoleName.SCHOOL_TEACHER.value: {
        Permission.VIEW_SCHOOL,
        Permission.MANAGE_CLASS,
        Permission.MANAGE_KID,
        Permission.VIEW_KID,
    },
    RoleName.SCHOOL_PARENT.value: {
        Permission.VIEW_SCHOOL,
        Permission.VIEW_KID,
    },
    RoleName.KID_GUARDIAN.value: {
        Permission.MANAGE_KID,
        Permission.VIEW_KID,
    },
}

# Roles mapped from the scheme flags of a school member
SCHOOL_SCHEME_ROLES = (
    RoleName.SCHOOL_ADMIN.value,
    RoleName.SCHOOL_TEACHER.value,
    RoleName.SCHOOL_PARENT.value,
)


def default_roles() -> list[Role]:
    """Build fresh models of the built-in roles."""
    return [
        Role(
            name=name,
            display_name=name.replace("_", " ").title(),
            description=f"Built-in {name.replace('_', ' ')} role",
            permissions=sorted(p.value for p in permissions),
            built_in=True,
            scheme_managed=name in SCHOOL_SCHEME_ROLES,
        )
        for name, permissions in ROLE_PERMISSIONS.items()
    ]


def permissions_of(roles: Iterable[Role]) -> set[str]:
    """Union of the permissions of the active ``roles``."""
    granted: set[str] = set()
    for role in roles:
        if role.delete_at == 0:
            granted.update(role.permissions)
    return granted
