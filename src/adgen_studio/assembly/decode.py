from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from adgen_studio.config import settings
from adgen_studio.errors import AssetDecodeError
from adgen_studio.models import ImageRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedImage:
    image: Image.Image
    width: int
    height: int


class ImageDecodeService(Protocol):
    async def decode(self, ref: ImageRef, asset: str) -> DecodedImage: ...


class PillowImageDecoder:
    """
    Decode uploaded image references with Pillow.

    Accepts raw bytes, `data:` URLs (what a browser FileReader produces) and
    filesystem paths. Decoding runs in a worker thread and is bounded by a
    timeout; every failure surfaces as AssetDecodeError naming the asset.
    """

    def __init__(self, timeout_s: float | None = None) -> None:
        self.timeout_s = settings.decode_timeout_s if timeout_s is None else timeout_s

    async def decode(self, ref: ImageRef, asset: str) -> DecodedImage:
        try:
            image = await asyncio.wait_for(asyncio.to_thread(_decode_sync, ref, asset), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            raise AssetDecodeError(asset, f"decode timed out after {self.timeout_s}s") from None
        logger.debug("decoded %s image %sx%s", asset, image.width, image.height)
        return DecodedImage(image=image, width=image.width, height=image.height)


def _decode_sync(ref: ImageRef, asset: str) -> Image.Image:
    data = _read_ref(ref, asset)
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise AssetDecodeError(asset, str(e) or type(e).__name__) from e


def _read_ref(ref: ImageRef, asset: str) -> bytes:
    if isinstance(ref, (bytes, bytearray)):
        if not ref:
            raise AssetDecodeError(asset, "empty image data")
        return bytes(ref)
    if isinstance(ref, str) and ref.startswith("data:"):
        return _parse_data_url(ref, asset)
    path = Path(ref)
    try:
        return path.read_bytes()
    except OSError as e:
        raise AssetDecodeError(asset, f"cannot read {path}: {e.strerror or e}") from e
    except ValueError as e:
        # e.g. an embedded NUL byte in the path
        raise AssetDecodeError(asset, f"invalid path: {e}") from e


def _parse_data_url(url: str, asset: str) -> bytes:
    header, sep, payload = url.partition(",")
    if not sep:
        raise AssetDecodeError(asset, "malformed data URL")
    if not header.endswith(";base64"):
        raise AssetDecodeError(asset, "data URL is not base64-encoded")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AssetDecodeError(asset, "invalid base64 payload") from e
