"""Tests for the file and HTTP dictionary loaders."""

import json

import httpx
import pytest

from cityhealth.domain.shared.error import ExternalServiceError, NotFoundError
from cityhealth.infrastructure.i18n.catalog_loader import FileCatalogLoader, HttpCatalogLoader


class TestFileCatalogLoader:
    def test_bundled_languages(self):
        assert FileCatalogLoader().available() == ["ar", "en", "fr"]

    @pytest.mark.asyncio
    async def test_loads_bundled_dictionary(self):
        catalog = await FileCatalogLoader().load("fr")

        assert catalog["nav"]["home"] == "Accueil"

    @pytest.mark.asyncio
    async def test_missing_language(self, tmp_path):
        with pytest.raises(NotFoundError):
            await FileCatalogLoader(tmp_path).load("de")

    @pytest.mark.asyncio
    async def test_language_cannot_escape_directory(self, tmp_path):
        (tmp_path / "outside.json").write_text("{}", encoding="utf-8")
        locales = tmp_path / "locales"
        locales.mkdir()

        with pytest.raises(NotFoundError):
            await FileCatalogLoader(locales).load("../outside")

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path):
        (tmp_path / "en.json").write_text("{oops", encoding="utf-8")

        with pytest.raises(ExternalServiceError):
            await FileCatalogLoader(tmp_path).load("en")

    @pytest.mark.asyncio
    async def test_non_object_json(self, tmp_path):
        (tmp_path / "en.json").write_text(json.dumps(["a"]), encoding="utf-8")

        with pytest.raises(ExternalServiceError):
            await FileCatalogLoader(tmp_path).load("en")


class TestHttpCatalogLoader:
    @pytest.mark.asyncio
    async def test_fetches_dictionary(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/static/locales/ar.json"
            return httpx.Response(200, json={"nav": {"home": "الرئيسية"}})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            catalog = await HttpCatalogLoader(client, "https://cdn.test/static/").load("ar")

        assert catalog == {"nav": {"home": "الرئيسية"}}

    @pytest.mark.asyncio
    async def test_missing_dictionary(self):
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(404))
        ) as client:
            with pytest.raises(NotFoundError):
                await HttpCatalogLoader(client, "https://cdn.test").load("de")

    @pytest.mark.asyncio
    async def test_server_error(self):
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(500))
        ) as client:
            with pytest.raises(ExternalServiceError):
                await HttpCatalogLoader(client, "https://cdn.test").load("en")

    @pytest.mark.asyncio
    async def test_invalid_body(self):
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        ) as client:
            with pytest.raises(ExternalServiceError):
                await HttpCatalogLoader(client, "https://cdn.test").load("en")
