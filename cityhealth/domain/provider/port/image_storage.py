from abc import abstractmethod
from typing import Protocol


class ImageStorage(Protocol):
    """Port to managed object storage for provider images.

    Contract: upload bytes, receive a stable reference URL. Resizing and
    compression happen before upload.
    """

    @abstractmethod
    async def upload(self, provider_id: str, filename: str, content: bytes) -> str: ...

    @abstractmethod
    async def delete(self, url: str) -> None: ...
