"""
Error models for tokenizer operations.
Every failure cause is normalized into a single NormalizedError shape.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union


UNKNOWN_ERROR_NAME = 'unknownTokenizerError'
UNKNOWN_ERROR_MESSAGE = 'Unknown Tokenizer Error'

SESSION_BINDING_ERROR = 'detokenizationiFrameSessionBinding'
BAD_DETOKENIZE_RESPONSE_ERROR = 'badDetokenizeResponse'
GRANT_NOT_CREATED_ERROR = 'grantNotCreated'


@dataclass(frozen=True)
class NormalizedError:
    """Uniform error shape returned by every failed operation."""
    name: str
    message: str
    code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'message': self.message, 'code': self.code}


class TokenizerApiError(Exception):
    """Raised by the transport when the service answers with an error status."""

    def __init__(self, status: int, error: Optional[Mapping[str, Any]] = None):
        self.status = status
        self.error = dict(error) if error else None
        detail = (self.error or {}).get('message') or 'no error document'
        super().__init__(f"Tokenizer responded with HTTP {status}: {detail}")


class ObjectStoreError(Exception):
    """Raised when an upload to or download from a signed URL is rejected."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class MalformedPayloadError(ValueError):
    """A service payload is missing a field the protocol requires."""


@dataclass(frozen=True)
class RemoteFailure:
    """The service rejected the call and may have sent an error document."""
    status: int
    name: Optional[str] = None
    message: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def from_api_error(cls, exc: TokenizerApiError) -> RemoteFailure:
        doc = exc.error or {}
        code = doc.get('code')
        return cls(
            status=exc.status,
            name=doc.get('name'),
            message=doc.get('message'),
            code=str(code) if code is not None else None,
        )

    def to_error(self) -> NormalizedError:
        return NormalizedError(
            name=self.name or UNKNOWN_ERROR_NAME,
            message=self.message or UNKNOWN_ERROR_MESSAGE,
            code=self.code or str(self.status),
        )


@dataclass(frozen=True)
class TransportFailure:
    """The call or transfer never produced a usable service answer."""
    name: str
    message: str
    code: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: Exception) -> TransportFailure:
        status = getattr(exc, 'status', None)
        return cls(
            name=type(exc).__name__,
            message=str(exc) or type(exc).__name__,
            code=str(status) if status is not None else None,
        )

    def to_error(self) -> NormalizedError:
        return NormalizedError(name=self.name, message=self.message, code=self.code)


@dataclass(frozen=True)
class ProtocolViolation:
    """A response broke the client-side protocol contract."""
    name: str
    message: str

    def to_error(self) -> NormalizedError:
        return NormalizedError(name=self.name, message=self.message, code='500')


@dataclass(frozen=True)
class UnknownFailure:
    """Catch-all for failures no other cause describes."""

    def to_error(self) -> NormalizedError:
        return NormalizedError(
            name=UNKNOWN_ERROR_NAME,
            message='Unknown Tokenization Error',
            code='500',
        )


FailureCause = Union[RemoteFailure, TransportFailure, ProtocolViolation, UnknownFailure]


MISSING_SESSION_BINDING = ProtocolViolation(
    name=SESSION_BINDING_ERROR,
    message='session hash was not set in response when detokenizing, unable to bind iFrame to a session',
)

BAD_DETOKENIZE_RESPONSE = ProtocolViolation(
    name=BAD_DETOKENIZE_RESPONSE_ERROR,
    message='Invalid response from Tokenizer when detokenizing data',
)

GRANT_NOT_CREATED = ProtocolViolation(
    name=GRANT_NOT_CREATED_ERROR,
    message='Tokenizer did not confirm creation of the grant',
)
