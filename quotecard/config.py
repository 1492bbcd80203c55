"""Configuration settings for Quote Card Editor.

Card rendering, templates, quote history and the OpenAI proxy endpoints.
"""

import json
from pathlib import Path
from typing import List, Optional, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Paths
    data_dir: Path = Path("data")
    fonts_dir: Optional[Path] = None  # Extra directory searched before system fonts

    @property
    def templates_file(self) -> Path:
        """Path to templates.json file."""
        return self.data_dir / "templates.json"

    @property
    def history_file(self) -> Path:
        """Path to quote_history.json file."""
        return self.data_dir / "quote_history.json"

    # Upstream API settings (OpenAI or any OpenAI-compatible API)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    chat_model: str = "gpt-4o-mini"
    image_model: str = "dall-e-3"
    upstream_timeout: float = 60.0
    download_timeout: float = 30.0

    # Quote history
    history_limit: int = 20

    # Deployment label reported by /api/health
    environment: str = "development"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # CORS settings (the proxy endpoints are called cross-origin by the editor)
    cors_origins: List[str] = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS origins from JSON string or list."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, treat as comma-separated list
                return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def has_api_key(self) -> bool:
        """Check if an upstream API key is configured."""
        return bool(self.openai_api_key.strip())

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

# Ensure directories exist
settings.data_dir.mkdir(parents=True, exist_ok=True)
