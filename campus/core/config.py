# campus/core/config.py
"""Application configuration using Pydantic."""
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    database_url: str
    jwt_secret_key: str
    redis_url: str = 'redis://localhost:6379/0'

    jwt_algorithm: str = 'HS256'
    access_token_expire_minutes: int = 60 * 24
    notification_retention_days: int = 30

    app_name: str = 'campus'
    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'info'
    database_echo: bool = False
    allowed_origins: List[str] = ['*']

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }

settings = Settings()
