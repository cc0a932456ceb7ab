from __future__ import annotations

from typing import Protocol


class TextSuggestionService(Protocol):
    """
    Free-text completion collaborator.

    No guarantee is made about the line count or format of the returned text;
    callers parse defensively. Failures may surface as any exception.
    """

    name: str

    async def complete(self, prompt: str) -> str: ...
