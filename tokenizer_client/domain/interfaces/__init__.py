"""Domain interfaces package - Protocols for the tokenizer's collaborators."""

from .tokenizer_api import TokenizerApi, ObjectStore

__all__ = [
    "TokenizerApi",
    "ObjectStore",
]
