from __future__ import annotations

import logging

from adgen_studio.config import Settings, settings
from adgen_studio.providers.base import TextSuggestionService

logger = logging.getLogger(__name__)


def text_service_from_settings(cfg: Settings = settings) -> TextSuggestionService | None:
    """
    Build the configured suggestion provider, or None when suggestions should
    always use the static fallbacks (no provider chosen, or no key set).
    """
    provider = (cfg.text_provider or "").strip().lower()
    if provider in ("", "none", "off"):
        return None

    if provider == "gemini":
        if not cfg.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; suggestions will use fallbacks")
            return None
        from adgen_studio.providers.gemini_provider import GeminiTextProvider

        return GeminiTextProvider(api_key=cfg.gemini_api_key, model=cfg.gemini_text_model)

    if provider == "openai":
        if not cfg.openai_api_key:
            logger.warning("OPENAI_API_KEY is not set; suggestions will use fallbacks")
            return None
        from adgen_studio.providers.openai_provider import OpenAITextProvider

        return OpenAITextProvider(api_key=cfg.openai_api_key, model=cfg.openai_text_model)

    raise ValueError(f"unknown text_provider {cfg.text_provider!r} (expected gemini, openai or none)")
