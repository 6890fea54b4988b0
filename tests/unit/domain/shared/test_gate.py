"""Tests for roles, principals and access gates."""

from cityhealth.domain.auth.model.principal import Principal
from cityhealth.domain.auth.model.role import Role
from cityhealth.domain.shared.authorization.gate import at_least, public


def principal(*roles: Role) -> Principal:
    return Principal(user_id="u", roles=frozenset(roles))


class TestPrincipal:
    def test_higher_role_inherits_lower(self):
        admin = principal(Role.ADMIN)

        assert admin.has_role(Role.CITIZEN)
        assert admin.has_role(Role.PROVIDER)
        assert not principal(Role.CITIZEN).has_role(Role.PROVIDER)

    def test_home_path_follows_highest_role(self):
        assert principal(Role.CITIZEN).home_path == "/"
        assert principal(Role.CITIZEN, Role.PROVIDER).home_path == "/provider-dashboard"
        assert principal(Role.ADMIN).home_path == "/admin"

    def test_no_roles_is_public(self):
        assert principal().highest_role is Role.PUBLIC


class TestGates:
    def test_public_allows_anyone(self):
        assert public().allows(None)
        assert public().allows(principal(Role.CITIZEN))

    def test_at_least_requires_principal_and_role(self):
        gate = at_least(Role.PROVIDER)

        assert not gate.allows(None)
        assert not gate.allows(principal(Role.CITIZEN))
        assert gate.allows(principal(Role.PROVIDER))
        assert gate.allows(principal(Role.ADMIN))

    def test_gates_compare_by_value(self):
        assert at_least(Role.ADMIN) == at_least(Role.ADMIN)
        assert public() == public()
