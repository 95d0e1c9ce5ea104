"""Configuration management for chatcompare."""

import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Provide clear, accurate, and helpful responses."
)
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


class Settings(BaseSettings):
    """Application settings, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CHATCOMPARE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # API Configuration
    api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("CHATCOMPARE_API_KEY", "OPENROUTER_API_KEY"),
        description="OpenRouter API key",
    )
    base_url: str = Field(OPENROUTER_BASE_URL, description="Chat completion endpoint")
    app_title: str = Field("AI Model Comparison App", description="X-Title header")
    referer: str = Field("http://localhost", description="HTTP-Referer header")
    request_timeout: Optional[float] = Field(
        None, description="Per-request timeout in seconds; unset waits indefinitely"
    )

    # Generation defaults
    system_prompt: str = Field(DEFAULT_SYSTEM_PROMPT)
    temperature: float = Field(DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(DEFAULT_MAX_TOKENS, gt=0)

    # Local storage
    credentials_path: Path = Field(
        Path.home() / ".config" / "chatcompare" / "credentials.json",
        description="Where a persisted API key is kept",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")


class ClientConfig:
    """Credential and endpoint details shared by reference between components.

    There is exactly one writer at a time: the last ``configure`` call wins.
    """

    def __init__(
        self,
        credential: Optional[str] = None,
        base_url: str = OPENROUTER_BASE_URL,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.credential = None
        self.base_url = base_url
        self.headers = dict(headers or {})
        self.configure(credential)

    def configure(self, credential: Optional[str]) -> None:
        credential = (credential or "").strip()
        self.credential = credential or None

    @property
    def is_configured(self) -> bool:
        return bool(self.credential)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientConfig":
        return cls(
            credential=settings.api_key,
            base_url=settings.base_url,
            headers={"HTTP-Referer": settings.referer, "X-Title": settings.app_title},
        )

    def __repr__(self) -> str:
        state = "configured" if self.is_configured else "unconfigured"
        return f"ClientConfig(base_url={self.base_url!r}, {state})"


def configure_logging(level: str = "INFO") -> None:
    """Install a basic stderr handler for applications embedding chatcompare."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
