"""
Configuration settings - Infrastructure component for managing client configuration.
Uses Pydantic for validation and environment variable loading.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...domain.models.tokenization import ClientConfig, DEFAULT_HOST


AUTHORIZATION_HEADER = 'Authorization'
SESSION_HASH_HEADER = 'x-session-hash'

CONFIG_DEFAULTS: Dict[str, Any] = {
    'host': DEFAULT_HOST,
    'base_route': '',
    'authentication_token': None,
}


class TokenizerSettings(BaseSettings):
    """Tokenization service connection configuration."""

    host: str = Field(DEFAULT_HOST)
    base_route: str = Field('')
    authentication_token: Optional[str] = Field(None, validation_alias='TOKENIZER_AUTH_TOKEN')

    # Transport timeout, applied by the HTTP adapter only
    timeout_s: float = Field(30.0)

    model_config = SettingsConfigDict(
        env_prefix='TOKENIZER_',
        env_file='.env',
        case_sensitive=False,
        extra='ignore',
        populate_by_name=True,
    )

    @field_validator('authentication_token', mode='before')
    @classmethod
    def blank_token_is_unset(cls, v):
        """An empty token means no Authorization header at all."""
        if v is None or str(v).strip() == '':
            return None
        return str(v).strip()


class StorageSettings(BaseSettings):
    """Object store transfer configuration."""

    timeout_s: float = Field(60.0)

    model_config = SettingsConfigDict(
        env_prefix='OBJECT_STORE_',
        env_file='.env',
        case_sensitive=False,
        extra='ignore',
    )


class AppSettings(BaseSettings):
    """Main application settings."""

    tokenizer: TokenizerSettings = Field(default_factory=TokenizerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    # Logging
    log_level: str = Field('INFO')
    log_format: str = Field('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            return 'INFO'
        return v.upper()

    def to_client_config(self) -> ClientConfig:
        return ClientConfig(
            host=self.tokenizer.host,
            base_route=self.tokenizer.base_route,
            authentication_token=self.tokenizer.authentication_token,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary, with the auth token masked."""
        tokenizer = self.tokenizer.model_dump()
        if tokenizer.get('authentication_token'):
            tokenizer['authentication_token'] = '***'
        return {
            'tokenizer': tokenizer,
            'storage': self.storage.model_dump(),
            'log_level': self.log_level,
        }


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Load settings once per process."""
    return AppSettings()
