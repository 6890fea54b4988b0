"""DI provider for HTTP-backed adapters (templates and dictionaries)."""

from pathlib import Path
from typing import AsyncIterable

import httpx
from dishka import provide

from cityhealth.config import Config
from cityhealth.domain.i18n.port.catalog_loader import CatalogLoader
from cityhealth.domain.navigation.port.template_store import TemplateStore
from cityhealth.infrastructure.http.template_store import FileTemplateStore, HttpTemplateStore
from cityhealth.infrastructure.i18n.catalog_loader import FileCatalogLoader, HttpCatalogLoader
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope

BUNDLED_TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

_HTTP_TIMEOUT = httpx.Timeout(
    connect=5.0,
    read=10.0,
    write=5.0,
    pool=5.0,
)


def is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


class HttpProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_http_client(self) -> AsyncIterable[httpx.AsyncClient]:
        async with httpx.AsyncClient(timeout=_HTTP_TIMEOUT) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_template_store(self, config: Config, client: httpx.AsyncClient) -> TemplateStore:
        location = config.navigation.templates_url
        if is_remote(location):
            return HttpTemplateStore(client, location)
        return FileTemplateStore(Path(location).expanduser() if location else BUNDLED_TEMPLATES_DIR)

    @provide(scope=Scope.APP)
    def get_catalog_loader(self, config: Config, client: httpx.AsyncClient) -> CatalogLoader:
        if is_remote(config.i18n.locales_url):
            return HttpCatalogLoader(client, config.i18n.locales_url)
        return FileCatalogLoader(config.i18n.locales_dir)
