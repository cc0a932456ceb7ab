from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Loads keys from process env, and also from a local .env file for convenience.
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8")

    # Keys
    gemini_api_key: str | None = None
    openai_api_key: str | None = None

    # Which provider backs headline/layout/background suggestions: gemini|openai|none
    text_provider: str = "gemini"
    gemini_text_model: str = "gemini-2.0-flash"
    openai_text_model: str = "gpt-4.1-mini"

    # Suspend points; both are treated as failures once exceeded.
    decode_timeout_s: float = 10.0
    suggestion_timeout_s: float = 15.0

    # Rendering
    default_brand_color: str = "#21808d"
    png_compress_level: int = 6

    log_level: str = "INFO"


settings = Settings()
