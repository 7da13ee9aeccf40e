"""
Signed URL object store - moves payload bytes directly to and from object storage.
"""

from __future__ import annotations
import logging
from typing import Mapping, Optional

import httpx

from ...domain.interfaces.tokenizer_api import ObjectStore
from ...domain.models.errors import ObjectStoreError


class SignedUrlObjectStore(ObjectStore):
    """Upload and download through pre-signed capability URLs."""

    def __init__(
        self,
        timeout_s: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._logger = logger or logging.getLogger(__name__)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_s))

    async def upload(self, url: str, headers: Mapping[str, str], payload: bytes) -> None:
        response = await self._client.put(url, content=payload, headers=dict(headers))
        if response.is_error:
            raise ObjectStoreError(
                f"Upload to object storage failed with HTTP {response.status_code}",
                status=response.status_code,
            )
        self._logger.debug(f"Uploaded {len(payload)} bytes to object storage")

    async def download(self, url: str, headers: Mapping[str, str]) -> bytes:
        response = await self._client.get(url, headers=dict(headers))
        if response.is_error:
            raise ObjectStoreError(
                f"Download from object storage failed with HTTP {response.status_code}",
                status=response.status_code,
            )
        self._logger.debug(f"Downloaded {len(response.content)} bytes from object storage")
        return response.content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
