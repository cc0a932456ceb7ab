from __future__ import annotations

from dataclasses import replace
from typing import Any

from adgen_studio.campaign import CampaignOrchestrator
from adgen_studio.models import AssetSet, CampaignCopy, ImageRef, RenderedCreative

STEP_ASSETS = 1
STEP_CAMPAIGN = 2
STEP_CREATIVES = 3

ASSET_FIELDS = ("product", "logo")


class StudioSession:
    """
    State behind the three-step wizard: assets, campaign copy, rendered output.

    The composer only ever sees immutable snapshots of `assets` and `copy`.
    """

    def __init__(self, orchestrator: CampaignOrchestrator | None = None) -> None:
        self.orchestrator = orchestrator or CampaignOrchestrator()
        self.assets = AssetSet()
        self.copy = CampaignCopy()
        self.step = STEP_ASSETS

    def upload(self, field: str, ref: ImageRef) -> None:
        if field == "product":
            self.assets = self.assets.with_product(ref)
        elif field == "logo":
            self.assets = self.assets.with_logo(ref)
        else:
            raise ValueError(f"unknown asset field {field!r} (expected one of {', '.join(ASSET_FIELDS)})")

    def set_brand_color(self, color: str) -> None:
        self.assets = self.assets.with_brand_color(color)

    def update_copy(self, **fields: Any) -> None:
        self.copy = replace(self.copy, **fields)

    def can_continue(self) -> bool:
        return self.assets.product_image is not None and self.assets.logo_image is not None

    def go_to(self, step: int) -> None:
        if step not in (STEP_ASSETS, STEP_CAMPAIGN, STEP_CREATIVES):
            raise ValueError(f"unknown wizard step {step}")
        if step >= STEP_CAMPAIGN and not self.can_continue():
            raise ValueError("upload a product image and a logo first")
        if step == STEP_CREATIVES and not self.orchestrator.creatives:
            raise ValueError("generate creatives first")
        self.step = step

    async def generate(self) -> dict[str, RenderedCreative]:
        assets, copy = self.assets, self.copy
        creatives = await self.orchestrator.generate_all(assets, copy)
        self.step = STEP_CREATIVES
        return creatives

    def reset(self) -> None:
        self.assets = AssetSet()
        self.copy = CampaignCopy()
        self.step = STEP_ASSETS
        self.orchestrator.reset()
