"""Page templates and translation dictionaries, served to the browser shell."""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse

from cityhealth.domain.i18n.port.catalog_loader import CatalogLoader
from cityhealth.domain.shared.error import TemplateNotFoundError
from cityhealth.infrastructure.http.di import BUNDLED_TEMPLATES_DIR
from cityhealth.infrastructure.http.template_store import FileTemplateStore

router = APIRouter(tags=["assets"], route_class=DishkaRoute)

_pages = FileTemplateStore(BUNDLED_TEMPLATES_DIR)


@router.get("/pages/{name}", response_class=HTMLResponse)
async def page_template(name: str) -> HTMLResponse:
    try:
        return HTMLResponse(await _pages.fetch(f"pages/{name}"))
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Page not found: {name}") from e


@router.get("/locales/{language}.json")
async def translations(language: str, loader: FromDishka[CatalogLoader]) -> dict[str, Any]:
    return await loader.load(language)
