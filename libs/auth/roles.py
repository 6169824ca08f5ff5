"""Role variants and the route access table.

Handlers never compare role strings directly; they depend on
``require_roles`` (see ``libs.auth.dependencies``) or call
:func:`has_role_access`.
"""

import enum


class UserRole(str, enum.Enum):
    PHOTOGRAPHER = "photographer"
    CLIENT = "client"
    ADMIN = "admin"


ROLE_ROUTES: dict[UserRole, tuple[str, ...]] = {
    UserRole.PHOTOGRAPHER: (
        "/",
        "/albums",
        "/analytics",
        "/clients",
        "/documents",
        "/settings",
        "/profile",
        "/calendar",
        "/wallet",
    ),
    UserRole.CLIENT: (
        "/my-albums",
        "/favorites",
        "/downloads",
        "/settings",
        "/profile",
    ),
    UserRole.ADMIN: (
        "/admin",
        "/settings",
        "/profile",
    ),
}

DEFAULT_HOME: dict[UserRole, str] = {
    UserRole.PHOTOGRAPHER: "/",
    UserRole.CLIENT: "/my-albums",
    UserRole.ADMIN: "/admin/dashboard",
}


def _matches(route: str, allowed: str) -> bool:
    if allowed == "/":
        return route == "/"
    return route == allowed or route.startswith(f"{allowed}/")


def has_role_access(role: UserRole, route: str) -> bool:
    """True if ``role`` may open ``route`` (exact match or a sub-path)."""
    return any(_matches(route, allowed) for allowed in ROLE_ROUTES[role])


def default_home(role: UserRole) -> str:
    return DEFAULT_HOME[role]
