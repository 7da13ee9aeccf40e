"""
Tokenizer HTTP adapter - Infrastructure implementation of the TokenizerApi protocol.
Handles communication with the tokenization service over httpx.
"""

from __future__ import annotations
import json
import logging
from typing import Any, Dict, Optional

import httpx

from ...domain.interfaces.tokenizer_api import TokenizerApi
from ...domain.models.errors import TokenizerApiError
from ...domain.models.tokenization import ApiResponse, RequestOptions


ROUTES = {
    'set_grant': '/grant/set',
    'verify_grant': '/grant/verify',
    'get_metadata': '/metadata/get',
    'tokenize': '/tokenize',
    'detokenize': '/detokenize',
}


class HttpTokenizerApi(TokenizerApi):
    """Adapter for the tokenization service REST API."""

    def __init__(
        self,
        base_path: str,
        timeout_s: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._base_path = base_path.rstrip('/')
        self._logger = logger or logging.getLogger(__name__)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_s))

    @property
    def base_path(self) -> str:
        return self._base_path

    async def set_grant(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        return await self._post('set_grant', request, options)

    async def verify_grant(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        return await self._post('verify_grant', request, options)

    async def get_metadata(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        return await self._post('get_metadata', request, options)

    async def tokenize(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        return await self._post('tokenize', request, options)

    async def detokenize(self, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        return await self._post('detokenize', request, options)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _post(self, call: str, request: Dict[str, Any], options: RequestOptions) -> ApiResponse:
        url = f"{self._base_path}{ROUTES[call]}"
        self._logger.debug(f"POST {url} ({call})")
        response = await self._client.post(url, json=request, headers=options.headers)

        body = _json_or_none(response)
        if response.is_error:
            error = body.get('error') if isinstance(body, dict) else None
            raise TokenizerApiError(response.status_code, error if isinstance(error, dict) else None)

        # The service wraps every payload as {"success": ..., "data": {...}}
        envelope = body if isinstance(body, dict) else {}
        data = envelope.get('data')
        return ApiResponse(
            data=data if isinstance(data, dict) else None,
            headers=response.headers,
            status=response.status_code,
            success=bool(envelope.get('success', data is not None)),
        )


def _json_or_none(response: httpx.Response) -> Optional[Any]:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
