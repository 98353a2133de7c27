"""
Application Configuration
Centralized settings, read from the environment and .env
"""
from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # MongoDB
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "brainsort"

    # LLM API (OpenAI-compatible chat completions)
    openai_api_key: str = ""
    openai_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai"
    openai_model: str = "gemini-2.5-flash"
    openai_timeout: Optional[float] = None  # None = wait for the reply

    # JWT
    jwt_secret: str = "your-super-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiration_days: int = 30

    # Auth
    password_min_length: int = 6
    session_cookie_name: str = "access_token"
    cookie_secure: bool = False  # True behind HTTPS
    login_path: str = "/auth"

    # Encryption
    encryption_key: str = "default-encryption-key-change-in-production"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    allowed_origins: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
