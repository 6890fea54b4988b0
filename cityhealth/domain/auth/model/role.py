"""Role hierarchy for authorization."""

from enum import IntEnum


class Role(IntEnum):
    """Hierarchical roles with numeric ordering.

    Higher values inherit all permissions of lower values.
    Gaps allow future role insertion without renumbering.
    """

    PUBLIC = 0
    CITIZEN = 10
    PROVIDER = 20
    ADMIN = 30


# Landing page per role after sign-in or a denied route
ROLE_HOME: dict[Role, str] = {
    Role.PUBLIC: "/",
    Role.CITIZEN: "/",
    Role.PROVIDER: "/provider-dashboard",
    Role.ADMIN: "/admin",
}
