"""
Tokenizer Client - exchange sensitive values for opaque tokens and back.
"""

__version__ = "1.0.0"
__author__ = "Tokenizer Client Team"

__all__ = [
    "TokenizerClient",
    "ClientConfig",
    "NormalizedError",
]

# Lazy attribute access to avoid importing httpx at package import time.
# This keeps `import tokenizer_client.domain...` safe during test collection.
def __getattr__(name: str):  # pragma: no cover - simple lazy loader
    if name == "TokenizerClient":
        from .client import TokenizerClient as _C
        return _C
    if name in {"ClientConfig", "NormalizedError"}:
        from .domain import ClientConfig, NormalizedError
        return {
            "ClientConfig": ClientConfig,
            "NormalizedError": NormalizedError,
        }[name]
    raise AttributeError(f"module 'tokenizer_client' has no attribute {name!r}")
