"""
Tokenizer client - Application core mediating access to the tokenization service.

Payload bytes never pass through the tokenizer itself: tokenize reserves a
token and a signed upload URL, detokenize hands back a signed download URL.
Every public operation returns a result object and never raises.
"""

from __future__ import annotations
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Type, TypeVar, Union

import httpx

from .domain.interfaces.tokenizer_api import ObjectStore, TokenizerApi
from .domain.models.errors import (
    BAD_DETOKENIZE_RESPONSE,
    GRANT_NOT_CREATED,
    MISSING_SESSION_BINDING,
    FailureCause,
    MalformedPayloadError,
    ObjectStoreError,
    RemoteFailure,
    TokenizerApiError,
    TransportFailure,
    UnknownFailure,
)
from .domain.models.tokenization import (
    ClientConfig,
    DetokenizeResult,
    DetokenizeToUrlResult,
    DownloadDescriptor,
    GrantResult,
    MetadataResult,
    OperationResult,
    RequestOptions,
    TokenizeResult,
    UploadDescriptor,
    VerifyGrantResult,
)
from .infrastructure.config.settings import AUTHORIZATION_HEADER, SESSION_HASH_HEADER, AppSettings
from .infrastructure.storage.signed_url import SignedUrlObjectStore
from .infrastructure.tokenizer.api import HttpTokenizerApi
from .utils import redact


R = TypeVar('R', bound=OperationResult)

# Failures that mean the call never produced a usable service answer
TRANSPORT_ERRORS = (httpx.HTTPError, ObjectStoreError, MalformedPayloadError, OSError)


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


class TokenizerClient:
    """Client for tokenizing and detokenizing sensitive values."""

    def __init__(
        self,
        config: Union[ClientConfig, Mapping[str, Any], None] = None,
        *,
        api: Optional[TokenizerApi] = None,
        object_store: Optional[ObjectStore] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._logger = logger or logging.getLogger(__name__)
        self._config = ClientConfig.merged(config)

        headers = {'Content-Type': 'application/json'}
        if self._config.authentication_token:
            headers[AUTHORIZATION_HEADER] = self._config.authentication_token
        self._base_headers = headers

        # Binds this instance to one browser session once a detokenize succeeds
        self._session_hash: Optional[str] = None

        self._base_path = self._config.base_path
        self._owned: List[Union[TokenizerApi, ObjectStore]] = []
        if api is None:
            api = HttpTokenizerApi(self._base_path, logger=self._logger)
            self._owned.append(api)
        if object_store is None:
            object_store = SignedUrlObjectStore(logger=self._logger)
            self._owned.append(object_store)
        self._api = api
        self._store = object_store

        self._logger.info(
            f"Tokenizer client initialized - Base path: {self._base_path}, "
            f"Auth token: {redact(self._config.authentication_token)}"
        )

    @classmethod
    def from_settings(cls, settings: AppSettings, logger: Optional[logging.Logger] = None) -> TokenizerClient:
        """Build a client with adapters configured from application settings."""
        config = settings.to_client_config()
        api = HttpTokenizerApi(config.base_path, timeout_s=settings.tokenizer.timeout_s, logger=logger)
        store = SignedUrlObjectStore(timeout_s=settings.storage.timeout_s, logger=logger)
        client = cls(config, api=api, object_store=store, logger=logger)
        client._owned.extend([api, store])
        return client

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def session_hash(self) -> Optional[str]:
        return self._session_hash

    @property
    def request_options(self) -> RequestOptions:
        """Headers for the next call, including the session binding once set."""
        headers = dict(self._base_headers)
        if self._session_hash is not None:
            headers[SESSION_HASH_HEADER] = self._session_hash
        return RequestOptions(headers=headers)

    async def aclose(self) -> None:
        """Close any HTTP clients this instance created."""
        for resource in self._owned:
            await resource.aclose()

    async def __aenter__(self) -> TokenizerClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def create_full_access_grant(self, session_id: str, token_id: str) -> GrantResult:
        """Allow a session to detokenize a token."""
        async def action() -> GrantResult:
            response = await self._api.set_grant(
                {'sessionId': session_id, 'tokenId': token_id},
                self.request_options,
            )
            if not response.success:
                return self._failed('create_full_access_grant', GrantResult, GRANT_NOT_CREATED)
            return GrantResult.ok()

        return await self._run('create_full_access_grant', GrantResult, action)

    async def verify_grant(self, session_id: str, token_id: str) -> VerifyGrantResult:
        """Ask the service whether a session holds a grant for a token.

        A negative verdict is still a successful call: check ``valid``.
        """
        async def action() -> VerifyGrantResult:
            response = await self._api.verify_grant(
                {'sessionId': session_id, 'tokenId': token_id},
                self.request_options,
            )
            valid = (response.data or {}).get('valid')
            if not isinstance(valid, bool):
                raise MalformedPayloadError("verifyGrant payload field 'valid' must be a boolean")
            return VerifyGrantResult.ok(valid)

        return await self._run('verify_grant', VerifyGrantResult, action)

    async def get_metadata(self, token_id: str) -> MetadataResult:
        """Fetch the metadata document stored with a token."""
        async def action() -> MetadataResult:
            response = await self._api.get_metadata({'tokenId': token_id}, self.request_options)
            metadata = (response.data or {}).get('metadata')
            if not isinstance(metadata, dict):
                raise MalformedPayloadError("getMetaData payload is missing 'metadata'")
            return MetadataResult.ok(token_id, metadata)

        return await self._run('get_metadata', MetadataResult, action)

    async def tokenize(self, value: Union[bytes, str], metadata: Dict[str, Any]) -> TokenizeResult:
        """Exchange a plaintext value for a token.

        The token is reserved before the payload is uploaded. If the upload
        fails the reservation stays behind on the service and the call
        still reports failure.
        """
        async def action() -> TokenizeResult:
            payload = value.encode('utf-8') if isinstance(value, str) else bytes(value)
            response = await self._api.tokenize({'metadata': metadata}, self.request_options)
            descriptor = UploadDescriptor.from_payload(response.data)
            try:
                await self._store.upload(descriptor.upload_url, descriptor.headers, payload)
            except Exception:
                self._logger.warning(
                    f"Token {descriptor.token_id} was reserved but its payload was not stored"
                )
                raise
            return TokenizeResult.ok(descriptor.token_id)

        return await self._run('tokenize', TokenizeResult, action)

    async def detokenize(self, token_id: str) -> DetokenizeResult:
        """Retrieve the plaintext bytes behind a token."""
        located = await self.detokenize_to_url(token_id)
        if not located.success:
            return DetokenizeResult.failed(located.error)

        async def action() -> DetokenizeResult:
            value = await self._store.download(located.download_url, located.headers or {})
            return DetokenizeResult.ok(token_id, value)

        return await self._run('detokenize', DetokenizeResult, action)

    async def detokenize_to_url(self, token_id: str) -> DetokenizeToUrlResult:
        """Get a signed download URL for a token's plaintext.

        The response must carry a session hash; it is recorded on this
        client and sent with every later request.
        """
        async def action() -> DetokenizeToUrlResult:
            response = await self._api.detokenize({'tokenId': token_id}, self.request_options)

            session_hash = _header(response.headers, SESSION_HASH_HEADER)
            if session_hash is None:
                return self._failed('detokenize_to_url', DetokenizeToUrlResult, MISSING_SESSION_BINDING)
            self._set_session_hash(session_hash)

            try:
                descriptor = DownloadDescriptor.from_payload(response.data)
            except MalformedPayloadError:
                return self._failed('detokenize_to_url', DetokenizeToUrlResult, BAD_DETOKENIZE_RESPONSE)
            return DetokenizeToUrlResult.ok(token_id, descriptor)

        return await self._run('detokenize_to_url', DetokenizeToUrlResult, action)

    def _set_session_hash(self, session_hash: str) -> None:
        # Sent with every later request; the service rejects grants bound to other sessions
        if self._session_hash is not None and self._session_hash != session_hash:
            self._logger.info("Session hash changed; rebinding client to new session")
        self._session_hash = session_hash
        self._logger.debug(f"Session hash set: {redact(session_hash)}")

    async def _run(self, operation: str, result_cls: Type[R], action: Callable[[], Awaitable[R]]) -> R:
        try:
            return await action()
        except TokenizerApiError as e:
            cause: FailureCause = RemoteFailure.from_api_error(e)
        except TRANSPORT_ERRORS as e:
            cause = TransportFailure.from_exception(e)
        except Exception:
            self._logger.exception(f"Unexpected error during {operation}")
            cause = UnknownFailure()
        return self._failed(operation, result_cls, cause)

    def _failed(self, operation: str, result_cls: Type[R], cause: FailureCause) -> R:
        error = cause.to_error()
        self._logger.warning(f"{operation} failed: {error.name} ({error.code}): {error.message}")
        return result_cls.failed(error)
