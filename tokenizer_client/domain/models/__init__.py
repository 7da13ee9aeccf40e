"""Domain models package."""

from .tokenization import (
    ClientConfig,
    RequestOptions,
    ApiResponse,
    UploadDescriptor,
    DownloadDescriptor,
    OperationResult,
    GrantResult,
    VerifyGrantResult,
    MetadataResult,
    TokenizeResult,
    DetokenizeToUrlResult,
    DetokenizeResult,
)
from .errors import (
    NormalizedError,
    TokenizerApiError,
    ObjectStoreError,
    MalformedPayloadError,
    RemoteFailure,
    TransportFailure,
    ProtocolViolation,
    UnknownFailure,
    FailureCause,
)

__all__ = [
    "ClientConfig",
    "RequestOptions",
    "ApiResponse",
    "UploadDescriptor",
    "DownloadDescriptor",
    "OperationResult",
    "GrantResult",
    "VerifyGrantResult",
    "MetadataResult",
    "TokenizeResult",
    "DetokenizeToUrlResult",
    "DetokenizeResult",
    "NormalizedError",
    "TokenizerApiError",
    "ObjectStoreError",
    "MalformedPayloadError",
    "RemoteFailure",
    "TransportFailure",
    "ProtocolViolation",
    "UnknownFailure",
    "FailureCause",
]
