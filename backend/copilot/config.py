"""
Configuration module for the Agent Copilot backend.

Loads environment variables and provides application settings.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str = "sqlite:///./copilot.db"
    cors_origins: str = "http://localhost:5173,http://localhost:8080"
    log_level: str = "INFO"

    # Simulated "typing" pause before the agent reply is streamed.
    response_delay_seconds: float = 1.5

    # Anti-repetition window and resampling bound per agent.
    response_history_size: int = 5
    max_resample_attempts: int = 10

    # Chat history shortcuts shown in the sidebar.
    chat_history_limit: int = 5
    chat_title_max_length: int = 30

    # Chat sessions untouched for this long are dropped.
    session_idle_timeout_seconds: float = 3600.0

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [
            origin.strip()
            for origin in self.cors_origins.split(",")
        ]

    class Config:
        """Pydantic settings configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
