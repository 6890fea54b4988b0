"""CatalogLoader adapters: bundled JSON files, or a dictionary host over HTTP."""

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from cityhealth.domain.i18n.port.catalog_loader import CatalogLoader
from cityhealth.domain.shared.error import ExternalServiceError, NotFoundError

logger = logging.getLogger(__name__)

BUNDLED_LOCALES_DIR = Path(__file__).resolve().parents[2] / "locales"


class FileCatalogLoader(CatalogLoader):
    """Reads ``<locales_dir>/<language>.json``."""

    def __init__(self, locales_dir: Path | None = None) -> None:
        self.locales_dir = (locales_dir or BUNDLED_LOCALES_DIR).expanduser()

    def available(self) -> list[str]:
        return sorted(p.stem for p in self.locales_dir.glob("*.json"))

    async def load(self, language: str) -> dict[str, Any]:
        path = self.locales_dir / f"{Path(language).name}.json"
        if not path.exists():
            raise NotFoundError(f"No translations for language: {language}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ExternalServiceError(f"Unreadable translations for {language}: {e}") from e
        if not isinstance(data, dict):
            raise ExternalServiceError(f"Translations for {language} are not a JSON object")
        return data


class HttpCatalogLoader(CatalogLoader):
    """Fetches ``<base_url>/locales/<language>.json`` using httpx."""

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def load(self, language: str) -> dict[str, Any]:
        url = f"{self._base_url}/locales/{language}.json"
        try:
            response = await self._client.get(url)
            if response.status_code == 404:
                raise NotFoundError(f"No translations for language: {language}")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Failed to fetch translations for {language}: {e}") from e
        except ValueError as e:
            raise ExternalServiceError(f"Invalid translations for {language}: {e}") from e
        if not isinstance(data, dict):
            raise ExternalServiceError(f"Translations for {language} are not a JSON object")
        return data
