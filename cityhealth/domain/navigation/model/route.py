"""Route table: path patterns with ``:name`` placeholders, matched in registration order."""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from cityhealth.domain.shared.authorization.gate import Gate, public
from cityhealth.domain.shared.error import InvalidStateError, RouteNotFoundError, ValidationError

_PARAM = re.compile(r":(\w+)")


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile ``/profile/:id`` into an anchored regex with named groups.

    Each placeholder matches one path segment (``[^/]+``); everything else
    is matched literally.
    """
    if not pattern.startswith("/"):
        raise ValidationError(f"Route pattern must start with '/': {pattern}", field="pattern")

    names = _PARAM.findall(pattern)
    if len(names) != len(set(names)):
        raise ValidationError(f"Duplicate placeholder in route pattern: {pattern}", field="pattern")

    parts: list[str] = []
    position = 0
    for m in _PARAM.finditer(pattern):
        parts.append(re.escape(pattern[position : m.start()]))
        parts.append(f"(?P<{m.group(1)}>[^/]+)")
        position = m.end()
    parts.append(re.escape(pattern[position:]))
    return re.compile("^" + "".join(parts) + "$")


@dataclass(frozen=True)
class Route:
    pattern: str
    template: str
    gate: Gate = field(default_factory=public)
    matcher: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matcher", compile_pattern(self.pattern))

    def match(self, path: str) -> dict[str, str] | None:
        m = self.matcher.match(path)
        return m.groupdict() if m else None


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    params: dict[str, str]
    path: str


class RouteTable:
    """Ordered, append-only list of routes.

    The first registered route whose pattern matches wins; a later route that
    can only match the same paths is never reached. The table is frozen when
    navigation starts and rejects further registrations.
    """

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._frozen = False

    def register(self, pattern: str, template: str, gate: Gate | None = None) -> Route:
        if self._frozen:
            raise InvalidStateError(
                f"Cannot register route {pattern!r}: navigation has already started"
            )
        route = Route(pattern=pattern, template=template, gate=gate or public())
        self._routes.append(route)
        return route

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, path: str) -> RouteMatch | None:
        for route in self._routes:
            params = route.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params, path=path)
        return None

    def require(self, path: str) -> RouteMatch:
        match = self.resolve(path)
        if match is None:
            raise RouteNotFoundError(path)
        return match

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)
