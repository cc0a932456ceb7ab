from __future__ import annotations

import asyncio

from adgen_studio.config import settings
from adgen_studio.errors import SuggestionServiceError


class OpenAITextProvider:
    name = "openai"

    def __init__(self, api_key: str, model: str | None = None) -> None:
        from openai import OpenAI  # type: ignore

        self.client = OpenAI(api_key=api_key)
        self.model = model or settings.openai_text_model

    async def complete(self, prompt: str) -> str:
        # The Responses API is the forward path; keep it minimal.
        resp = await asyncio.to_thread(
            self.client.responses.create,
            model=self.model,
            input=prompt,
        )

        text = getattr(resp, "output_text", None) or ""
        if not text.strip():
            raise SuggestionServiceError(f"{self.name} returned an empty response")
        return text
