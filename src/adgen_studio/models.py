from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Union

from PIL import Image

from adgen_studio.config import settings

# bytes, a data: URL, or a filesystem path
ImageRef = Union[bytes, str, Path]

HEADLINE_MAX_CHARS = 32
CTA_MAX_CHARS = 18

_HEX_RE = re.compile(r"^[0-9a-f]{6}$")


def normalize_hex_color(value: str) -> str:
    s = (value or "").strip().lower().lstrip("#")
    if len(s) == 3:
        s = "".join([c * 2 for c in s])
    if not _HEX_RE.match(s):
        raise ValueError(f"brand color must be a #rrggbb hex string, got {value!r}")
    return f"#{s}"


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    s = normalize_hex_color(hex_color).lstrip("#")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


class Theme(str, Enum):
    CLEAN = "Clean"
    BOLD = "Bold"
    MINIMAL = "Minimal"
    VIBRANT = "Vibrant"
    LUXURY = "Luxury"


class Tone(str, Enum):
    PROFESSIONAL = "Professional"
    FRIENDLY = "Friendly"
    URGENT = "Urgent"
    PLAYFUL = "Playful"


@dataclass(frozen=True)
class AssetSet:
    product_image: ImageRef | None = None
    logo_image: ImageRef | None = None
    brand_color: str = field(default_factory=lambda: settings.default_brand_color)

    def __post_init__(self) -> None:
        object.__setattr__(self, "brand_color", normalize_hex_color(self.brand_color))

    def with_product(self, ref: ImageRef) -> AssetSet:
        return replace(self, product_image=ref)

    def with_logo(self, ref: ImageRef) -> AssetSet:
        return replace(self, logo_image=ref)

    def with_brand_color(self, color: str) -> AssetSet:
        return replace(self, brand_color=color)


@dataclass(frozen=True)
class CampaignCopy:
    # Length limits are advisory here; see compliance.check_compliance.
    headline: str = ""
    cta: str = ""
    theme: Theme = Theme.CLEAN
    tone: Tone = Tone.PROFESSIONAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "theme", Theme(self.theme))
        object.__setattr__(self, "tone", Tone(self.tone))


@dataclass(frozen=True)
class FormatSpec:
    name: str
    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


FACEBOOK = FormatSpec("facebook", 1080, 1080)
INSTAGRAM = FormatSpec("instagram", 1080, 1920)
DISPLAY = FormatSpec("display", 1200, 628)

FORMATS: tuple[FormatSpec, ...] = (FACEBOOK, INSTAGRAM, DISPLAY)


def format_by_name(name: str) -> FormatSpec:
    for fmt in FORMATS:
        if fmt.name == name:
            return fmt
    raise KeyError(name)


@dataclass(frozen=True)
class RenderedCreative:
    format_name: str
    png: bytes
    created_at: datetime

    @property
    def size(self) -> tuple[int, int]:
        with Image.open(BytesIO(self.png)) as img:
            return img.size


@dataclass(frozen=True)
class ComplianceResult:
    passed: bool
    score: int
    report: str


@dataclass
class SuggestionBundle:
    headlines: list[str] = field(default_factory=list)
    layouts: list[str] = field(default_factory=list)
    backgrounds: list[str] = field(default_factory=list)
