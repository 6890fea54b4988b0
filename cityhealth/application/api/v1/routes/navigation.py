"""Route resolution for the browser shell's client-side router."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query
from pydantic import BaseModel

from cityhealth.domain.auth.port.identity_provider import IdentityProvider
from cityhealth.domain.navigation.model.route import RouteTable

router = APIRouter(
    prefix="/routes",
    tags=["navigation"],
    route_class=DishkaRoute,
)


class RouteMatchResponse(BaseModel):
    path: str
    pattern: str
    template: str
    params: dict[str, str]
    allowed: bool


@router.get("/resolve")
async def resolve_route(
    routes: FromDishka[RouteTable],
    identity: FromDishka[IdentityProvider],
    path: str = Query(..., description="Path without query string, e.g. /profile/42"),
) -> RouteMatchResponse:
    """First registered route matching `path`; 404 when none does."""
    match = routes.require(path)
    return RouteMatchResponse(
        path=match.path,
        pattern=match.route.pattern,
        template=match.route.template,
        params=match.params,
        allowed=match.route.gate.allows(identity.current_principal()),
    )


@router.get("")
async def list_routes(routes: FromDishka[RouteTable]) -> list[dict[str, str]]:
    return [{"pattern": r.pattern, "template": r.template} for r in routes]
