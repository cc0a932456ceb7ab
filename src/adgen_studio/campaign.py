from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable

from adgen_studio.assembly.render import CreativeComposer
from adgen_studio.compliance import check_compliance
from adgen_studio.config import settings
from adgen_studio.errors import MissingInputError, SuggestionServiceError
from adgen_studio.models import (
    FORMATS,
    AssetSet,
    CampaignCopy,
    ComplianceResult,
    RenderedCreative,
    SuggestionBundle,
)
from adgen_studio.providers.base import TextSuggestionService

logger = logging.getLogger(__name__)

HEADLINE_COUNT = 3
LAYOUT_COUNT = 4
BACKGROUND_COUNT = 4

LAYOUT_FALLBACKS: tuple[str, ...] = (
    "Left Layout: Logo top-left, Product center, Text bottom",
    "Center Layout: Symmetric product center, headline below",
    "Right Layout: Product left, Text stacked right, CTA big",
    "Premium Layout: Gradient background + floating text",
)

BACKGROUND_FALLBACKS: tuple[str, ...] = (
    "Sunset: #FF6B6B → #FFE66D",
    "Ocean: #0891B2 → #06B6D4",
    "Forest: #059669 → #10B981",
    "Purple: #7C3AED → #A78BFA",
)

_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")


def headline_fallbacks(headline: str) -> list[str]:
    return [
        f"{headline} - Limited Time!",
        f"Get Your {headline} Today",
        f"Exclusive: {headline}",
    ]


def parse_suggestion_lines(text: str, count: int) -> list[str]:
    lines: list[str] = []
    for raw in (text or "").splitlines():
        line = _LIST_MARKER_RE.sub("", raw).strip()
        if line:
            lines.append(line)
    return lines[:count]


def missing_inputs(assets: AssetSet, copy: CampaignCopy) -> list[str]:
    missing: list[str] = []
    if assets.product_image is None:
        missing.append("product_image")
    if assets.logo_image is None:
        missing.append("logo_image")
    if not copy.headline.strip():
        missing.append("headline")
    return missing


class CampaignOrchestrator:
    """
    Coordinates the three format renders and the optional suggestion service.

    `creatives` only ever holds a complete set from one successful generation;
    `suggestions` lists are replaced wholesale on each request.
    """

    def __init__(
        self,
        composer: CreativeComposer | None = None,
        text_service: TextSuggestionService | None = None,
        suggestion_timeout_s: float | None = None,
    ) -> None:
        self.composer = composer or CreativeComposer()
        self.text_service = text_service
        self.suggestion_timeout_s = (
            settings.suggestion_timeout_s if suggestion_timeout_s is None else suggestion_timeout_s
        )
        self.creatives: dict[str, RenderedCreative] = {}
        self.suggestions = SuggestionBundle()

    async def generate_all(self, assets: AssetSet, copy: CampaignCopy) -> dict[str, RenderedCreative]:
        missing = missing_inputs(assets, copy)
        if missing:
            raise MissingInputError(missing)

        # All-or-nothing: gather raises on the first failure and nothing is published.
        # Decode once, then share the decoded images across the three formats.
        decoded = await self.composer.decode_assets(assets)
        jobs = [asyncio.ensure_future(self.composer.compose(assets, copy, fmt, decoded)) for fmt in FORMATS]
        try:
            rendered = await asyncio.gather(*jobs)
        except BaseException:
            for job in jobs:
                job.cancel()
            raise
        result = {c.format_name: c for c in rendered}
        self.creatives = result
        logger.info("generated %d creatives: %s", len(result), ", ".join(result))
        return dict(result)

    async def suggest_headlines(self, copy: CampaignCopy) -> list[str]:
        if not copy.headline.strip():
            raise MissingInputError(["headline"])

        prompt = (
            f'Generate {HEADLINE_COUNT} alternative ad headlines based on "{copy.headline}".\n'
            "Each under 32 characters.\n"
            f"Tone: {copy.tone.value}. Theme: {copy.theme.value}.\n"
            "Return one per line, no numbering.\n"
        )
        lines = await self._suggest("headlines", prompt, HEADLINE_COUNT, lambda: headline_fallbacks(copy.headline))
        self.suggestions.headlines = lines
        return list(lines)

    async def suggest_layouts(self, copy: CampaignCopy) -> list[str]:
        prompt = (
            f"Suggest {LAYOUT_COUNT} layout compositions for ads.\n"
            "Include logo, product, headline, CTA.\n"
            f"Visual theme: {copy.theme.value}. Tone: {copy.tone.value}.\n"
            "Return one per line.\n"
        )
        lines = await self._suggest("layouts", prompt, LAYOUT_COUNT, lambda: list(LAYOUT_FALLBACKS))
        self.suggestions.layouts = lines
        return list(lines)

    async def suggest_backgrounds(self, copy: CampaignCopy) -> list[str]:
        prompt = (
            f"Suggest {BACKGROUND_COUNT} gradient color schemes for an ad background.\n"
            f"Visual theme: {copy.theme.value}. Tone: {copy.tone.value}.\n"
            "Format each as 'Name: #RRGGBB → #RRGGBB'. Return one per line.\n"
        )
        lines = await self._suggest("backgrounds", prompt, BACKGROUND_COUNT, lambda: list(BACKGROUND_FALLBACKS))
        self.suggestions.backgrounds = lines
        return list(lines)

    def check_compliance(self, copy: CampaignCopy) -> ComplianceResult:
        return check_compliance(copy)

    def reset(self) -> None:
        self.creatives = {}
        self.suggestions = SuggestionBundle()

    async def _suggest(
        self,
        feature: str,
        prompt: str,
        count: int,
        fallback: Callable[[], list[str]],
    ) -> list[str]:
        """
        Two-branch strategy: ask the service, and on any failure at all use the
        feature's static fallback. Callers cannot tell the two branches apart.
        """
        try:
            return await self._ask_service(prompt, count)
        except Exception as e:
            logger.warning("%s suggestions fell back to static list: %s", feature, e)
            return fallback()

    async def _ask_service(self, prompt: str, count: int) -> list[str]:
        if self.text_service is None:
            raise SuggestionServiceError("no text suggestion service configured")
        try:
            text = await asyncio.wait_for(self.text_service.complete(prompt), timeout=self.suggestion_timeout_s)
        except asyncio.TimeoutError:
            raise SuggestionServiceError(f"no response within {self.suggestion_timeout_s}s") from None
        lines = parse_suggestion_lines(text, count)
        if not lines:
            raise SuggestionServiceError("response contained no usable lines")
        return lines
