from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageChops, ImageDraw, ImageFont

from adgen_studio.assembly.decode import DecodedImage, ImageDecodeService, PillowImageDecoder
from adgen_studio.config import settings
from adgen_studio.models import AssetSet, CampaignCopy, FormatSpec, RenderedCreative, hex_to_rgb

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Layout:
    """
    Placement constants shared by every format.

    Fractions are relative to the canvas; the logo offset is in absolute pixels.
    Font sizes are given at `reference_width` and scale linearly with canvas width.
    """

    product_width: float = 0.45
    product_x: float = 0.27
    product_y: float = 0.25

    logo_width: float = 0.15
    logo_offset: tuple[int, int] = (20, 20)

    text_x: float = 0.05
    headline_y: float = 0.70
    cta_y: float = 0.82

    reference_width: int = 1080
    headline_px: int = 42
    cta_px: int = 28

    headline_fill: tuple[int, int, int] = (255, 255, 255)
    cta_fill: tuple[int, int, int] = (255, 215, 0)


DEFAULT_LAYOUT = Layout()


@dataclass(frozen=True)
class DecodedAssets:
    product: DecodedImage | None = None
    logo: DecodedImage | None = None


class CreativeComposer:
    """
    Deterministic single-pass renderer for one creative format.

    Identical assets, copy and format always produce byte-identical PNGs.
    """

    def __init__(
        self,
        decoder: ImageDecodeService | None = None,
        layout: Layout = DEFAULT_LAYOUT,
        compress_level: int | None = None,
    ) -> None:
        self.decoder = decoder or PillowImageDecoder()
        self.layout = layout
        self.compress_level = settings.png_compress_level if compress_level is None else compress_level

    async def compose(
        self,
        assets: AssetSet,
        copy: CampaignCopy,
        fmt: FormatSpec,
        decoded: DecodedAssets | None = None,
    ) -> RenderedCreative:
        """
        Render one format. Pass `decoded` (from `decode_assets`) to reuse the
        same decoded images across several formats.
        """
        if decoded is None:
            decoded = await self.decode_assets(assets)

        # Pillow work runs off the event loop so concurrent formats overlap.
        png = await asyncio.to_thread(self._compose_sync, decoded, assets.brand_color, copy, fmt)
        logger.debug("composed %s creative (%sx%s, %d bytes)", fmt.name, fmt.width, fmt.height, len(png))
        return RenderedCreative(format_name=fmt.name, png=png, created_at=datetime.now(timezone.utc))

    async def decode_assets(self, assets: AssetSet) -> DecodedAssets:
        # Wait on exactly the assets that are present; absent ones are skipped.
        jobs: dict[str, asyncio.Future] = {}
        if assets.product_image is not None:
            jobs["product"] = asyncio.ensure_future(self.decoder.decode(assets.product_image, "product"))
        if assets.logo_image is not None:
            jobs["logo"] = asyncio.ensure_future(self.decoder.decode(assets.logo_image, "logo"))
        if not jobs:
            return DecodedAssets()

        try:
            results = await asyncio.gather(*jobs.values())
        except BaseException:
            for job in jobs.values():
                job.cancel()
            raise
        decoded = dict(zip(jobs.keys(), results))
        return DecodedAssets(product=decoded.get("product"), logo=decoded.get("logo"))

    def _compose_sync(self, decoded: DecodedAssets, brand_color: str, copy: CampaignCopy, fmt: FormatSpec) -> bytes:
        # Draw order is fixed regardless of which decode finished first.
        canvas = _linear_gradient(fmt.size, hex_to_rgb(brand_color), (255, 255, 255))
        if decoded.product is not None:
            self._place_product(canvas, decoded.product)
        if decoded.logo is not None:
            self._place_logo(canvas, decoded.logo)
        self._draw_copy(canvas, copy)
        return _encode_png(canvas, self.compress_level)

    def _place_product(self, canvas: Image.Image, product: DecodedImage) -> None:
        w, h = canvas.size
        lay = self.layout
        resized = _scale_to_width(product.image, int(round(w * lay.product_width)))
        _paste_rgba(canvas, resized, (int(round(w * lay.product_x)), int(round(h * lay.product_y))))

    def _place_logo(self, canvas: Image.Image, logo: DecodedImage) -> None:
        w, _ = canvas.size
        resized = _scale_to_width(logo.image, int(round(w * self.layout.logo_width)))
        _paste_rgba(canvas, resized, self.layout.logo_offset)

    def _draw_copy(self, canvas: Image.Image, copy: CampaignCopy) -> None:
        w, h = canvas.size
        lay = self.layout
        draw = ImageDraw.Draw(canvas)
        x = int(round(w * lay.text_x))

        if copy.headline:
            font = _load_font(_scaled_px(lay.headline_px, w, lay.reference_width))
            draw.text((x, int(round(h * lay.headline_y))), copy.headline, font=font, fill=lay.headline_fill)

        if copy.cta:
            font = _load_font(_scaled_px(lay.cta_px, w, lay.reference_width))
            draw.text((x, int(round(h * lay.cta_y))), copy.cta, font=font, fill=lay.cta_fill)


def _linear_gradient(
    size: tuple[int, int],
    start_rgb: tuple[int, int, int],
    end_rgb: tuple[int, int, int],
) -> Image.Image:
    """
    Linear gradient from the top-left corner to the bottom-right corner.

    A pixel's blend factor is its projection onto the canvas diagonal, which
    decomposes into an x term plus a y term; each term is built as a 1px strip
    and stretched, then the two are summed.
    """
    w, h = size
    diag_sq = float(w * w + h * h)
    row = Image.new("L", (w, 1))
    row.putdata([int(round(255 * x * w / diag_sq)) for x in range(w)])
    col = Image.new("L", (1, h))
    col.putdata([int(round(255 * y * h / diag_sq)) for y in range(h)])

    mask = ImageChops.add(
        row.resize((w, h), Image.Resampling.NEAREST),
        col.resize((w, h), Image.Resampling.NEAREST),
    )
    start = Image.new("RGB", (w, h), start_rgb)
    end = Image.new("RGB", (w, h), end_rgb)
    return Image.composite(end, start, mask)


def _scale_to_width(img: Image.Image, target_w: int) -> Image.Image:
    iw, ih = img.size
    target_w = max(1, target_w)
    if iw <= 0 or ih <= 0:
        return img
    target_h = max(1, int(round(target_w * (ih / iw))))
    return img.resize((target_w, target_h), Image.Resampling.LANCZOS)


def _paste_rgba(canvas: Image.Image, img: Image.Image, xy: tuple[int, int]) -> None:
    rgba = img.convert("RGBA")
    canvas.paste(rgba.convert("RGB"), xy, rgba.getchannel("A"))


def _scaled_px(px: int, width: int, reference_width: int) -> int:
    return max(8, int(round(px * width / reference_width)))


_BOLD_FONT_CANDIDATES: list[str] = [
    "assets/fonts/DejaVuSans-Bold.ttf",
    "assets/fonts/Inter-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "C:\\Windows\\Fonts\\arialbd.ttf",
]


def _load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Prefer a bold TTF font (bundled or system). Without one, fall back to
    Pillow's built-in font at the requested size.
    """
    for c in _BOLD_FONT_CANDIDATES:
        if Path(c).exists():
            return ImageFont.truetype(c, size=size)
    return ImageFont.load_default(size=size)


def _encode_png(img: Image.Image, compress_level: int) -> bytes:
    # No metadata chunks and a fixed compression level keep output byte-stable.
    buf = BytesIO()
    img.save(buf, format="PNG", compress_level=compress_level, optimize=False)
    return buf.getvalue()
