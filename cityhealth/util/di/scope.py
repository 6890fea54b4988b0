"""Dishka scopes for CityHealth."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: one client session or server process (caches, cursors, bus, listeners)
    - UOW: a single HTTP request or CLI command
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
