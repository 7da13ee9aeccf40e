"""Tokenizer infrastructure package - HTTP transport for the tokenization service."""

from .api import HttpTokenizerApi, ROUTES

__all__ = [
    "HttpTokenizerApi",
    "ROUTES",
]
