from __future__ import annotations

import io
import zipfile
from collections.abc import Mapping

from adgen_studio.models import FORMATS, RenderedCreative


def export_filename(creative: RenderedCreative) -> str:
    millis = int(creative.created_at.timestamp() * 1000)
    return f"adgen-{creative.format_name}-{millis}.png"


def export_zip(creatives: Mapping[str, RenderedCreative]) -> bytes:
    """Bundle every rendered creative into one zip, in the fixed format order."""
    if not creatives:
        raise ValueError("no creatives to export")

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for fmt in FORMATS:
            creative = creatives.get(fmt.name)
            if creative is None:
                continue
            zf.writestr(export_filename(creative), creative.png)
    return buf.getvalue()
