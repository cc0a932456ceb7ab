from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from adgen_studio.config import settings
from adgen_studio.models import CTA_MAX_CHARS, HEADLINE_MAX_CHARS, CampaignCopy, ComplianceResult
from adgen_studio.providers.base import TextSuggestionService

logger = logging.getLogger(__name__)

PASS_SCORE = 98
FAIL_SCORE = 80


def check_compliance(copy: CampaignCopy) -> ComplianceResult:
    """
    Static copy-length policy. Always succeeds; a failing check is a result
    with `passed=False`, not an error.
    """
    headline_ok = len(copy.headline) <= HEADLINE_MAX_CHARS
    cta_ok = len(copy.cta) <= CTA_MAX_CHARS
    passed = headline_ok and cta_ok
    score = PASS_SCORE if passed else FAIL_SCORE

    report = "\n".join(
        [
            _field_line("Headline", len(copy.headline), HEADLINE_MAX_CHARS, headline_ok),
            _field_line("CTA", len(copy.cta), CTA_MAX_CHARS, cta_ok),
            f"Score: {score}/100",
        ]
    )
    return ComplianceResult(passed=passed, score=score, report=report)


def _field_line(label: str, length: int, limit: int, ok: bool) -> str:
    status = "✓ OK" if ok else "✗ Too long"
    return f"{label}: {status} ({length}/{limit})"


async def enrich_compliance_report(
    copy: CampaignCopy,
    result: ComplianceResult,
    service: TextSuggestionService | None,
    timeout_s: float | None = None,
) -> ComplianceResult:
    """
    Append short reviewer notes from the text service to the report.

    Decoration only: `passed` and `score` are carried over untouched, and any
    service failure returns the original result.
    """
    if service is None:
        return result

    prompt = (
        "You are reviewing ad copy for a brand compliance check.\n"
        "Give at most 3 short bullet notes on clarity and tone. No preamble.\n"
        f"Headline: {copy.headline}\n"
        f"CTA: {copy.cta}\n"
        f"Tone: {copy.tone.value}\n"
    )
    timeout = settings.suggestion_timeout_s if timeout_s is None else timeout_s
    try:
        text = await asyncio.wait_for(service.complete(prompt), timeout=timeout)
    except Exception as e:
        logger.warning("compliance notes unavailable from %s: %s", getattr(service, "name", "service"), e)
        return result

    notes = [ln.strip() for ln in (text or "").splitlines() if ln.strip()][:3]
    if not notes:
        return result
    return replace(result, report=result.report + "\nAI notes:\n" + "\n".join(notes))
