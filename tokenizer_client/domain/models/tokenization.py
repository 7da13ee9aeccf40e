"""
Domain models for tokenization.
Configuration, service descriptors and per-operation results.
"""

from __future__ import annotations
import base64
import copy
from dataclasses import dataclass, field, fields, replace
from typing import Any, ClassVar, Dict, Mapping, Optional, Union
from urllib.parse import urljoin, urlparse

from .errors import MalformedPayloadError, NormalizedError


DEFAULT_HOST = 'http://localhost:37766'

_CONFIG_ALIASES = {
    'host': 'host',
    'baseRoute': 'base_route',
    'base_route': 'base_route',
    'authenticationToken': 'authentication_token',
    'authentication_token': 'authentication_token',
}

_DEFAULT_PORTS = {'http': 80, 'https': 443}


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for a TokenizerClient."""
    host: str = DEFAULT_HOST
    base_route: str = ''
    authentication_token: Optional[str] = None

    def __post_init__(self):
        parsed = urlparse(self.host)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Tokenizer host must be an absolute URL, got {self.host!r}")

    @classmethod
    def merged(cls, overrides: Union[ClientConfig, Mapping[str, Any], None] = None) -> ClientConfig:
        """Merge a partial config over the defaults, keeping no reference to the input."""
        if overrides is None:
            return cls()
        if isinstance(overrides, ClientConfig):
            return replace(overrides)

        values: Dict[str, Any] = {}
        for key, value in copy.deepcopy(dict(overrides)).items():
            if key not in _CONFIG_ALIASES:
                raise ValueError(f"Unknown tokenizer config key: {key!r}")
            if value is None:
                # Unset fields keep their defaults
                continue
            values[_CONFIG_ALIASES[key]] = value
        return cls(**values)

    @property
    def base_path(self) -> str:
        """Absolute URL every service route is resolved against."""
        if self.base_route != '':
            return urljoin(self.host, self.base_route)
        return origin_of(self.host)


def origin_of(url: str) -> str:
    """Scheme, host and non-default port of a URL."""
    p = urlparse(url)
    scheme = p.scheme.lower()
    netloc = (p.hostname or '').lower()
    if ':' in netloc:
        netloc = f"[{netloc}]"
    if p.port is not None and _DEFAULT_PORTS.get(scheme) != p.port:
        netloc = f"{netloc}:{p.port}"
    return f"{scheme}://{netloc}"


@dataclass(frozen=True)
class RequestOptions:
    """Options attached to every transport call."""
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiResponse:
    """Unwrapped service reply: the `data` payload plus HTTP response headers."""
    data: Optional[Dict[str, Any]]
    headers: Mapping[str, str] = field(default_factory=dict)
    status: int = 200
    success: bool = True


def _require(payload: Mapping[str, Any], key: str, kind: str) -> str:
    value = payload.get(key)
    if value is None:
        raise MalformedPayloadError(f"{kind} payload is missing '{key}'")
    if not isinstance(value, str) or not value:
        raise MalformedPayloadError(f"{kind} payload field '{key}' must be a non-empty string")
    return value


def _signed_headers(payload: Mapping[str, Any], kind: str) -> Dict[str, str]:
    headers = payload.get('headers')
    if headers is None:
        return {}
    if not isinstance(headers, Mapping):
        raise MalformedPayloadError(f"{kind} payload field 'headers' must be an object")
    for key, value in headers.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise MalformedPayloadError(f"{kind} payload header {key!r} must map a string to a string")
    return dict(headers)


@dataclass(frozen=True)
class UploadDescriptor:
    """Signed destination reserved for one tokenize upload."""
    upload_url: str
    headers: Dict[str, str]
    token_id: str

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> UploadDescriptor:
        if not isinstance(payload, Mapping):
            raise MalformedPayloadError("tokenize response carried no data")
        return cls(
            upload_url=_require(payload, 'uploadUrl', 'tokenize'),
            headers=_signed_headers(payload, 'tokenize'),
            token_id=_require(payload, 'tokenId', 'tokenize'),
        )


@dataclass(frozen=True)
class DownloadDescriptor:
    """Signed source for one detokenize download."""
    download_url: str
    headers: Dict[str, str]

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> DownloadDescriptor:
        if not isinstance(payload, Mapping):
            raise MalformedPayloadError("detokenize response carried no data")
        return cls(
            download_url=_require(payload, 'downloadUrl', 'detokenize'),
            headers=_signed_headers(payload, 'detokenize'),
        )


@dataclass(frozen=True)
class OperationResult:
    """Base result: either success with operation fields, or failure with an error."""
    success: bool
    error: Optional[NormalizedError] = None

    # dataclass field name -> key used in the serialized shape
    _wire_names: ClassVar[Dict[str, str]] = {}

    @classmethod
    def failed(cls, error: NormalizedError):
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {'success': False, 'error': self.error.to_dict() if self.error else None}
        out: Dict[str, Any] = {'success': True}
        for f in fields(self):
            if f.name in ('success', 'error'):
                continue
            value = getattr(self, f.name)
            key = self._wire_names.get(f.name, f.name)
            if isinstance(value, bytes):
                try:
                    value = value.decode('utf-8')
                except UnicodeDecodeError:
                    # Binary payloads are emitted base64 encoded under a separate key
                    out[f"{key}Base64"] = base64.b64encode(value).decode('ascii')
                    continue
            out[key] = value
        return out


@dataclass(frozen=True)
class GrantResult(OperationResult):

    @classmethod
    def ok(cls) -> GrantResult:
        return cls(success=True)


@dataclass(frozen=True)
class VerifyGrantResult(OperationResult):
    valid: Optional[bool] = None

    @classmethod
    def ok(cls, valid: bool) -> VerifyGrantResult:
        return cls(success=True, valid=valid)


@dataclass(frozen=True)
class MetadataResult(OperationResult):
    token_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    _wire_names: ClassVar[Dict[str, str]] = {'token_id': 'tokenId'}

    @classmethod
    def ok(cls, token_id: str, metadata: Dict[str, Any]) -> MetadataResult:
        return cls(success=True, token_id=token_id, metadata=metadata)


@dataclass(frozen=True)
class TokenizeResult(OperationResult):
    token_id: Optional[str] = None

    _wire_names: ClassVar[Dict[str, str]] = {'token_id': 'tokenId'}

    @classmethod
    def ok(cls, token_id: str) -> TokenizeResult:
        return cls(success=True, token_id=token_id)


@dataclass(frozen=True)
class DetokenizeToUrlResult(OperationResult):
    token_id: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    download_url: Optional[str] = None

    _wire_names: ClassVar[Dict[str, str]] = {'token_id': 'tokenId', 'download_url': 'downloadUrl'}

    @classmethod
    def ok(cls, token_id: str, descriptor: DownloadDescriptor) -> DetokenizeToUrlResult:
        return cls(
            success=True,
            token_id=token_id,
            headers=dict(descriptor.headers),
            download_url=descriptor.download_url,
        )


@dataclass(frozen=True)
class DetokenizeResult(OperationResult):
    token_id: Optional[str] = None
    value: Optional[bytes] = None

    _wire_names: ClassVar[Dict[str, str]] = {'token_id': 'tokenId'}

    @classmethod
    def ok(cls, token_id: str, value: bytes) -> DetokenizeResult:
        return cls(success=True, token_id=token_id, value=value)
