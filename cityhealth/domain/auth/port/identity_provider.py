from abc import abstractmethod
from typing import Protocol

from cityhealth.domain.auth.model.principal import Principal


class IdentityProvider(Protocol):
    """Port to the managed identity provider.

    Answers only "who is signed in, with which roles".
    """

    @abstractmethod
    def current_principal(self) -> Principal | None:
        """Return the signed-in principal, or None when anonymous."""
        ...
