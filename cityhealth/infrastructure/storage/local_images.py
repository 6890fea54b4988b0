"""Local filesystem implementation of the ImageStorage port."""

import logging
import uuid
from pathlib import Path

from cityhealth.domain.provider.port.image_storage import ImageStorage
from cityhealth.domain.shared.error import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class LocalImageStorage(ImageStorage):
    """Stores images under ``<base_path>/provider-images/<provider_id>/``.

    Returned URLs are ``<public_base_url>/provider-images/<provider_id>/<name>``
    and stay valid until the image is deleted.
    """

    def __init__(self, base_path: Path, public_base_url: str) -> None:
        self.base_path = base_path.expanduser()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _safe_name(self, value: str, what: str) -> str:
        """Reject names that would escape their directory."""
        safe = Path(value).name
        if not safe or safe != value or safe in {".", ".."}:
            raise ValidationError(f"Invalid {what}: {value}", field=what)
        return safe

    async def upload(self, provider_id: str, filename: str, content: bytes) -> str:
        provider_dir = self._safe_name(provider_id, "provider_id")
        name = f"{uuid.uuid4().hex[:12]}_{self._safe_name(filename, 'filename')}"
        target_dir = self.base_path / "provider-images" / provider_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        (target_dir / name).write_bytes(content)
        logger.debug("Stored %d bytes at %s", len(content), target_dir / name)
        return f"{self.public_base_url}/provider-images/{provider_dir}/{name}"

    def path_for(self, url: str) -> Path:
        prefix = f"{self.public_base_url}/"
        if not url.startswith(prefix):
            raise NotFoundError(f"Not a stored image: {url}")
        relative = Path(url[len(prefix) :])
        target = (self.base_path / relative).resolve()
        if not target.is_relative_to(self.base_path.resolve()):
            raise NotFoundError(f"Not a stored image: {url}")
        return target

    async def delete(self, url: str) -> None:
        target = self.path_for(url)
        if not target.exists():
            raise NotFoundError(f"Image not found: {url}")
        target.unlink()
