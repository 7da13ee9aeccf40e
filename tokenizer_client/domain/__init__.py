"""Domain layer - Tokenization models and ports with no transport dependencies."""

from .models.tokenization import (
    ClientConfig,
    UploadDescriptor,
    DownloadDescriptor,
    GrantResult,
    VerifyGrantResult,
    MetadataResult,
    TokenizeResult,
    DetokenizeToUrlResult,
    DetokenizeResult,
)
from .models.errors import NormalizedError

__all__ = [
    "ClientConfig",
    "UploadDescriptor",
    "DownloadDescriptor",
    "GrantResult",
    "VerifyGrantResult",
    "MetadataResult",
    "TokenizeResult",
    "DetokenizeToUrlResult",
    "DetokenizeResult",
    "NormalizedError",
]
