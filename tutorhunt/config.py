from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Optional

class Settings(BaseSettings):
    """
    Settings for the TutorHunt API.

    Please do not modify this file directly.
    Instead, create a .env file in the root directory of the project
    and specify the settings you would like to change there.
    For example, if you would like to cache the stats endpoint in redis,
    add the following line to the .env file:
    - USE_REDIS=True

    SECRET_KEY is required and must be set in the .env file or the environment.
    It signs the session cookie, so it should never be pushed to GitHub.

    SUMMARY:
    - Override settings (if needed) using a .env file
    - Never push the .env file to GitHub (it should be in .gitignore)
    - LOCAL=False switches the session cookie to Secure + SameSite=None for production
    """

    # Application settings
    app_name: str = "TutorHunt API"
    app_version: str = "0.1.0"
    app_host: str = "0.0.0.0"
    app_port: int = 4000

    # Local vs production settings
    local: bool = True # Default to local development

    # Token settings
    access_token_expire_minutes: int = 600 # 10 hours
    secret_key: str
    hash_algorithm: str = "HS256"
    token_cookie_name: str = "token"
    token_rate_limit: str = "10/minute"

    # Logs settings
    logs_dir: str = "logs"

    # Database settings
    db_url: str = "sqlite:///tutorhunt_db.db" # Default, for local development

    # Redis settings
    use_redis: bool = False # Default to not using Redis, change this to True if you have a Redis server set up
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    stats_cache_seconds: int = 60

    # Pagination settings
    default_page_size: int = 10
    max_page_size: int = 100

    # CORS settings
    cors_origins: List[str] = ["http://localhost:5173"]

    # Load settings from .env file
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache() # Cache settings to avoid reading .env file multiple times
def get_settings():
    """
    Use this function as a dependency to get the settings object.
    Dependency injection will make it easier to test endpoints with different settings, simply inject a different settings object.
    """
    return Settings()
