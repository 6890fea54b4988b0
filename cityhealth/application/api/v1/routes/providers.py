"""Provider profile API routes."""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, UploadFile
from pydantic import BaseModel

from cityhealth.domain.auth.port.identity_provider import IdentityProvider
from cityhealth.domain.provider.service.provider import ProviderService

router = APIRouter(
    prefix="/providers",
    tags=["providers"],
    route_class=DishkaRoute,
)


class FavoriteResponse(BaseModel):
    provider_id: str
    favorited: bool


class ImageUploaded(BaseModel):
    provider_id: str
    image_url: str


@router.get("/{provider_id}")
async def get_provider(
    provider_id: str,
    providers: FromDishka[ProviderService],
) -> dict[str, Any]:
    """Provider profile. Counts as a view."""
    return await providers.view_profile(provider_id)


@router.post("/{provider_id}/favorite")
async def toggle_favorite(
    provider_id: str,
    providers: FromDishka[ProviderService],
    identity: FromDishka[IdentityProvider],
) -> FavoriteResponse:
    favorited = await providers.toggle_favorite(identity.current_principal(), provider_id)
    return FavoriteResponse(provider_id=provider_id, favorited=favorited)


@router.post("/{provider_id}/image")
async def upload_image(
    provider_id: str,
    file: UploadFile,
    providers: FromDishka[ProviderService],
    identity: FromDishka[IdentityProvider],
) -> ImageUploaded:
    """Replace the provider's profile image. Providers and admins only."""
    content = await file.read()
    url = await providers.upload_image(
        identity.current_principal(), provider_id, file.filename or "unknown", content
    )
    return ImageUploaded(provider_id=provider_id, image_url=url)
