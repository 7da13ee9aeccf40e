"""
Tokenizer collaborator protocols.
Defines the contract for the service transport and the object store.
"""

from __future__ import annotations
from typing import Any, Dict, Mapping, Protocol

from ..models.tokenization import ApiResponse, RequestOptions


class TokenizerApi(Protocol):
    """Protocol for the tokenization service transport.

    Each call raises TokenizerApiError when the service rejects it and
    lets transport exceptions propagate.
    """

    async def set_grant(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        """Create a full access grant for {sessionId, tokenId}."""
        ...

    async def verify_grant(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        """Check a grant for {sessionId, tokenId}; data carries {valid}."""
        ...

    async def get_metadata(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        """Fetch metadata for {tokenId}; data carries {metadata}."""
        ...

    async def tokenize(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        """Reserve a token for {metadata}; data carries {uploadUrl, headers, tokenId}."""
        ...

    async def detokenize(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        """Request a download for {tokenId}; data carries {downloadUrl, headers}."""
        ...

    async def aclose(self) -> None:
        ...


class ObjectStore(Protocol):
    """Protocol for moving payload bytes through pre-signed URLs."""

    async def upload(self, url: str, headers: Mapping[str, str], payload: bytes) -> None:
        ...

    async def download(self, url: str, headers: Mapping[str, str]) -> bytes:
        ...

    async def aclose(self) -> None:
        ...
