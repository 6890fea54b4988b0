"""Session-backed identity adapter."""

import logging

from cityhealth.domain.auth.model.principal import Principal
from cityhealth.domain.auth.port.identity_provider import IdentityProvider

logger = logging.getLogger(__name__)


class SessionIdentityProvider(IdentityProvider):
    """Holds the principal reported by the identity provider's auth-state callback."""

    def __init__(self, principal: Principal | None = None) -> None:
        self._principal = principal

    def current_principal(self) -> Principal | None:
        return self._principal

    def sign_in(self, principal: Principal) -> None:
        logger.info("Signed in: user=%s roles=%s", principal.user_id, sorted(principal.roles))
        self._principal = principal

    def sign_out(self) -> None:
        if self._principal is not None:
            logger.info("Signed out: user=%s", self._principal.user_id)
        self._principal = None
