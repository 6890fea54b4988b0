"""The application's page routes, in match order."""

from cityhealth.domain.auth.model.role import Role
from cityhealth.domain.navigation.model.route import RouteTable
from cityhealth.domain.shared.authorization.gate import Gate, at_least, public

SITE_ROUTES: list[tuple[str, str, Gate]] = [
    ("/", "pages/home.html", public()),
    ("/home", "pages/home.html", public()),
    ("/search", "pages/search.html", public()),
    ("/profile/:id", "pages/profile.html", public()),
    ("/favorites", "pages/favorites.html", at_least(Role.CITIZEN)),
    ("/auth", "pages/auth.html", public()),
    ("/emergency", "pages/emergency.html", public()),
    ("/provider-dashboard", "pages/provider-dashboard.html", at_least(Role.PROVIDER)),
    ("/admin", "pages/admin.html", at_least(Role.ADMIN)),
]


def register_site_routes(table: RouteTable) -> RouteTable:
    for pattern, template, gate in SITE_ROUTES:
        table.register(pattern, template, gate)
    return table
