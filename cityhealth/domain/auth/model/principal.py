"""Principal: signed-in identity with roles, supplied by the identity provider."""

from dataclasses import dataclass

from cityhealth.domain.auth.model.role import ROLE_HOME, Role


@dataclass(frozen=True)
class Principal:
    """The signed-in user as reported by the managed identity provider.

    Only the identity and roles are used, for UI gating. No credentials live here.
    """

    user_id: str
    roles: frozenset[Role]
    display_name: str | None = None

    def has_role(self, role: Role) -> bool:
        """Check if any assigned role >= the given role (hierarchy comparison)."""
        return any(r >= role for r in self.roles)

    @property
    def highest_role(self) -> Role:
        return max(self.roles, default=Role.PUBLIC)

    @property
    def home_path(self) -> str:
        return ROLE_HOME.get(self.highest_role, "/")
