"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings loaded from environment variables."""

    # API Keys (generation is refused while this is unset)
    gemini_api_key: Optional[str] = None

    # Server
    port: int = 8080
    host: str = "0.0.0.0"

    # Logging
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "*"  # Comma-separated origins or "*" for all

    # Gemini Settings
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.7
    gemini_max_tokens: int = 1024
    generation_timeout: float = 30.0  # seconds

    # Firestore
    firebase_project_id: Optional[str] = None
    recipes_collection: str = "recipes"
    users_collection: str = "users"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get list of CORS origins."""
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class ClientSettings(BaseSettings):
    """Settings for the client side (request client, auth session, theme)."""

    backend_url: str = "http://localhost:8080"
    firebase_api_key: Optional[str] = None
    request_timeout: float = 45.0
    theme_file: Path = Path.home() / ".masterchef" / "theme.json"

    model_config = SettingsConfigDict(
        env_prefix="MASTERCHEF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
