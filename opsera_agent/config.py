"""Configuration settings.

Copyright (c) 2025 Patrick Morrison. Licensed under the MIT License.
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Development-only credential, override with VALID_API_KEY in any real deployment.
DEFAULT_API_KEY = 'opsera-dev-key-12345'


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

    host: str = Field(default='0.0.0.0')
    port: int = Field(default=3847)
    valid_api_key: str = Field(default=DEFAULT_API_KEY)
    log_level: str = Field(default='INFO')
    log_format: str = Field(default='text')  # 'text', 'json' or 'kv'
    cors_origins: str = Field(default='*', description='Comma-separated list of allowed origins')
    sse_keepalive_sec: float = Field(default=15.0, gt=0)
    session_queue_size: int = Field(default=100, gt=0)
    session_idle_timeout: float = Field(default=0.0, ge=0, description='0 disables the idle reaper')
    reaper_interval_sec: float = Field(default=60.0, gt=0)
    max_sessions: int = Field(default=0, ge=0, description='0 means unbounded')

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(',') if o.strip()]

    @property
    def uses_default_key(self) -> bool:
        return self.valid_api_key == DEFAULT_API_KEY


settings = Settings()
