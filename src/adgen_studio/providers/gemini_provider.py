from __future__ import annotations

import asyncio

from adgen_studio.config import settings
from adgen_studio.errors import SuggestionServiceError


class GeminiTextProvider:
    name = "gemini"

    def __init__(self, api_key: str, model: str | None = None) -> None:
        # Imported lazily so the app can start without the dependency installed.
        from google import genai  # type: ignore

        self.client = genai.Client(api_key=api_key)
        self.model = model or settings.gemini_text_model

    async def complete(self, prompt: str) -> str:
        # The sync client runs in a worker thread so callers can bound it with a timeout.
        resp = await asyncio.to_thread(
            self.client.models.generate_content,
            model=self.model,
            contents=prompt,
        )
        text: str | None = getattr(resp, "text", None)
        if not text or not text.strip():
            raise SuggestionServiceError(f"{self.name} returned an empty response")
        return text
