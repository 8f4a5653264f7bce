"""Vizcom image storage (CDN) client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from vizcom_mcp.config import DEFAULT_STORAGE_URL


def to_image_url(image_path: str, storage_url: str = DEFAULT_STORAGE_URL) -> str:
    """Turn a storage path into a full URL; URLs pass through unchanged."""
    if image_path.startswith("http"):
        return image_path
    return f"{storage_url.rstrip('/')}/{image_path.lstrip('/')}"


class StorageClient(Protocol):
    """Interface for downloading generated images."""

    def image_url(self, image_path: str) -> str:
        """Return the public URL of an image path."""

    async def fetch_image_bytes(self, image_path: str) -> bytes:
        """Download an image by storage path or URL."""


@dataclass
class HttpxStorageClient(StorageClient):
    """Storage client implemented with httpx."""

    storage_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, storage_url: str = DEFAULT_STORAGE_URL) -> "HttpxStorageClient":
        """Create a storage client with a managed httpx session."""
        return cls(storage_url=storage_url, http_client=httpx.AsyncClient())

    def image_url(self, image_path: str) -> str:
        return to_image_url(image_path, self.storage_url)

    async def fetch_image_bytes(self, image_path: str) -> bytes:
        """Download the raw image bytes."""
        response = await self.http_client.get(
            self.image_url(image_path), timeout=30, follow_redirects=True
        )
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
