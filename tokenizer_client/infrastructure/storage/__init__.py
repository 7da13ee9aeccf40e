"""Storage infrastructure package - signed URL transfers."""

from .signed_url import SignedUrlObjectStore

__all__ = [
    "SignedUrlObjectStore",
]
