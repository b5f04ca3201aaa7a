"""
Server configuration and environment settings.
"""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Server settings
    app_name: str = "Accounting Law Search API"
    app_version: str = "1.0.0"
    debug: bool = False
    api_prefix: str = "/api"
    
    # CORS settings
    cors_origins: list[str] = ["*"]
    
    # Corpus settings
    corpus_path: Path = Path("./data/laws.json")
    
    # LLM settings
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.0-flash"
    model_timeout_seconds: float = 30.0
    
    # Chat loop bounds
    max_tool_iterations: int = 5
    max_history_messages: int = 20
    tool_result_limit: int = 10
    
    class Config:
        env_file = (".env", ".env.local")
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
