"""NavigationService - resolves paths to routes, renders templates, announces pages."""

import logging
from dataclasses import field
from urllib.parse import parse_qsl, urlsplit

import logfire

from cityhealth.config import NavigationConfig
from cityhealth.domain.auth.port.identity_provider import IdentityProvider
from cityhealth.domain.i18n.service.translator import Translator
from cityhealth.domain.navigation.event.page_ready import PageReady
from cityhealth.domain.navigation.model.route import Route, RouteMatch, RouteTable
from cityhealth.domain.navigation.model.viewport import (
    NavigationState,
    Viewport,
    not_found_view,
)
from cityhealth.domain.navigation.port.template_store import TemplateStore
from cityhealth.domain.shared.authorization.gate import Gate
from cityhealth.domain.shared.error import InvalidStateError, TemplateNotFoundError
from cityhealth.domain.shared.port.event_bus import EventBus
from cityhealth.domain.shared.service import Service

logger = logging.getLogger(__name__)

# Redirect chains longer than this indicate a gate/home misconfiguration
MAX_REDIRECTS = 3


class NavigationService(Service):
    """Navigation controller.

    Routes must all be registered before start(). Each navigation moves
    through resolving -> rendering -> ready, or ends in error with the
    not-found view shown. A navigation that is superseded while its template
    is being fetched neither renders nor publishes PageReady.
    """

    routes: RouteTable
    templates: TemplateStore
    viewport: Viewport
    bus: EventBus
    identity: IdentityProvider
    config: NavigationConfig
    translator: Translator | None = None

    state: NavigationState = field(default=NavigationState.IDLE, init=False)
    current_path: str | None = field(default=None, init=False)
    history: list[str] = field(default_factory=list, init=False)
    return_path: str | None = field(default=None, init=False)
    _started: bool = field(default=False, init=False, repr=False)
    _generation: int = field(default=0, init=False, repr=False)

    def register(self, pattern: str, template: str, gate: Gate | None = None) -> Route:
        return self.routes.register(pattern, template, gate)

    @property
    def started(self) -> bool:
        return self._started

    async def start(self, initial_path: str = "/") -> NavigationState:
        if self._started:
            raise InvalidStateError("Navigation already started")
        self.routes.freeze()
        self._started = True
        logger.info("Navigation starting with %d registered routes", len(self.routes))
        self.history.append(initial_path)
        return await self._load(initial_path)

    async def navigate(self, path: str) -> NavigationState:
        """Push a history entry for `path` and render it.

        Re-navigating to the page already shown is a no-op; after a not-found
        or failed render the same path is loaded again.
        """
        self._ensure_started()
        if path == self.current_path and self.state is NavigationState.READY:
            return self.state
        self.history.append(path)
        return await self._load(path)

    async def back(self) -> NavigationState:
        """Return to the previous history entry, as the browser's back button does."""
        self._ensure_started()
        if len(self.history) < 2:
            return self.state
        self.history.pop()
        return await self._load(self.history[-1])

    async def reload(self) -> NavigationState:
        self._ensure_started()
        if self.current_path is None:
            return self.state
        return await self._load(self.current_path)

    async def resume_after_sign_in(self) -> NavigationState:
        """Go to the path a gate redirected away from, or the principal's home."""
        principal = self.identity.current_principal()
        target = self.return_path or (principal.home_path if principal else "/")
        self.return_path = None
        return await self.navigate(target)

    def resolve(self, path: str) -> RouteMatch | None:
        return self.routes.resolve(urlsplit(path).path or "/")

    def _ensure_started(self) -> None:
        if not self._started:
            raise InvalidStateError("Navigation used before start(); register routes, then start")

    def _gate_redirect(self, match: RouteMatch) -> str | None:
        principal = self.identity.current_principal()
        if match.route.gate.allows(principal):
            return None
        if principal is None:
            self.return_path = match.path
            return self.config.login_path
        return principal.home_path

    async def _load(self, path: str, redirects: int = 0) -> NavigationState:
        self._generation += 1
        generation = self._generation

        with logfire.span("Navigate"):
            self.state = NavigationState.RESOLVING
            split = urlsplit(path)
            match = self.routes.resolve(split.path or "/")
            if match is None:
                logger.warning("Route not found: %s", path)
                return self._show_not_found(path)

            redirect = self._gate_redirect(match)
            if redirect is not None:
                if redirect == match.path or redirects >= MAX_REDIRECTS:
                    logger.error("Gate redirect loop at %s", path)
                    return self._show_not_found(path)
                logger.info("Access to %s denied, redirecting to %s", path, redirect)
                self.history[-1:] = [redirect]
                return await self._load(redirect, redirects + 1)

            self.current_path = path
            self.state = NavigationState.RENDERING
            try:
                content = await self.templates.fetch(match.route.template)
            except TemplateNotFoundError as e:
                if generation != self._generation:
                    return self.state
                logger.warning("Template fetch failed for %s: %s", path, e.message)
                return self._show_not_found(path)

            if generation != self._generation:
                logger.debug("Navigation to %s superseded, discarding template", path)
                return self.state

            self.viewport.inject(content, path)
            self.state = NavigationState.READY
            await self.bus.publish(
                PageReady(
                    path=path,
                    pattern=match.route.pattern,
                    params=match.params,
                    query=dict(parse_qsl(split.query)),
                )
            )
            return self.state

    def _text(self, key: str, default: str) -> str:
        if self.translator is None:
            return default
        value = self.translator.t(key)
        return default if value == key else value

    def _show_not_found(self, path: str) -> NavigationState:
        self.current_path = path
        self.viewport.inject(
            not_found_view(
                path,
                title=self._text("notFound.title", "404 - Page Not Found"),
                message=self._text("notFound.message", "The page you're looking for doesn't exist."),
                home_label=self._text("notFound.goHome", "Go Home"),
            ),
            path,
        )
        self.state = NavigationState.ERROR
        return self.state
