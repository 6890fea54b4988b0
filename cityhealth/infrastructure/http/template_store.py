"""TemplateStore adapters: over HTTP with httpx, or from a local directory."""

from pathlib import Path

import httpx

from cityhealth.domain.navigation.port.template_store import TemplateStore
from cityhealth.domain.shared.error import TemplateNotFoundError


class HttpTemplateStore(TemplateStore):
    """Fetches page markup from a static file host using httpx."""

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def fetch(self, path: str) -> str:
        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TemplateNotFoundError(path, reason=f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TemplateNotFoundError(path, reason=type(e).__name__) from e
        return response.text


class FileTemplateStore(TemplateStore):
    """Reads page markup from a directory (the bundled templates by default)."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _resolve(self, path: str) -> Path:
        target = (self.root / path.lstrip("/")).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise TemplateNotFoundError(path, reason="outside template root")
        return target

    async def fetch(self, path: str) -> str:
        target = self._resolve(path)
        try:
            return target.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateNotFoundError(path, reason=type(e).__name__) from e
