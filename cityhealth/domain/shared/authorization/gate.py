"""Access gates for routes and user actions: public() and at_least(Role)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cityhealth.domain.auth.model.principal import Principal
    from cityhealth.domain.auth.model.role import Role


class Gate:
    """Base for access gates.

    Every route carries a gate. Subclasses decide whether a (possibly
    anonymous) principal may pass.
    """

    def allows(self, principal: Principal | None) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Public(Gate):
    """No authentication required."""

    def allows(self, principal: Principal | None) -> bool:
        return True


@dataclass(frozen=True)
class AtLeast(Gate):
    """Gate that requires the principal to have at least the given role."""

    role: "Role"

    def allows(self, principal: Principal | None) -> bool:
        return principal is not None and principal.has_role(self.role)


_PUBLIC = Public()


def public() -> Public:
    """Mark a route or action as publicly accessible (no auth required)."""
    return _PUBLIC


def at_least(role: "Role") -> AtLeast:
    """Mark a route or action as requiring at least the given role."""
    return AtLeast(role=role)
