from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from adgen_studio.campaign import CampaignOrchestrator
from adgen_studio.compliance import enrich_compliance_report
from adgen_studio.config import settings
from adgen_studio.errors import AssetDecodeError, MissingInputError
from adgen_studio.export import export_filename, export_zip
from adgen_studio.models import Theme, Tone, format_by_name
from adgen_studio.providers.registry import text_service_from_settings
from adgen_studio.session import ASSET_FIELDS, StudioSession

logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="adgen studio")

session = StudioSession(CampaignOrchestrator(text_service=text_service_from_settings()))


def _state() -> dict[str, Any]:
    orch = session.orchestrator
    return {
        "step": session.step,
        "assets": {
            "product": session.assets.product_image is not None,
            "logo": session.assets.logo_image is not None,
            "brand_color": session.assets.brand_color,
        },
        "campaign": {
            "headline": session.copy.headline,
            "cta": session.copy.cta,
            "theme": session.copy.theme.value,
            "tone": session.copy.tone.value,
        },
        "creatives": {
            name: {"filename": export_filename(c), "created_at": c.created_at.isoformat()}
            for name, c in orch.creatives.items()
        },
        "suggestions": {
            "headlines": orch.suggestions.headlines,
            "layouts": orch.suggestions.layouts,
            "backgrounds": orch.suggestions.backgrounds,
        },
    }


@app.get("/state")
def get_state():
    return _state()


@app.post("/assets/brand-color")
def set_brand_color(color: str = Form(...)):
    try:
        session.set_brand_color(color)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _state()


@app.post("/assets/{field}")
async def upload_asset(field: str, file: UploadFile = File(...)):
    if field not in ASSET_FIELDS:
        raise HTTPException(status_code=404, detail=f"unknown asset field '{field}'")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="uploaded file is empty")
    session.upload(field, content)
    logger.info("%s uploaded (%d bytes)", field, len(content))
    return _state()


@app.post("/campaign")
def update_campaign(
    headline: str | None = Form(None),
    cta: str | None = Form(None),
    theme: str | None = Form(None),
    tone: str | None = Form(None),
):
    updates: dict[str, Any] = {}
    if headline is not None:
        updates["headline"] = headline
    if cta is not None:
        updates["cta"] = cta
    try:
        if theme is not None:
            updates["theme"] = Theme(theme)
        if tone is not None:
            updates["tone"] = Tone(tone)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    session.update_copy(**updates)
    return _state()


@app.post("/step")
def go_to_step(step: int = Form(...)):
    try:
        session.go_to(step)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _state()


@app.post("/suggestions/{kind}")
async def suggest(kind: str):
    orch = session.orchestrator
    handlers = {
        "headlines": orch.suggest_headlines,
        "layouts": orch.suggest_layouts,
        "backgrounds": orch.suggest_backgrounds,
    }
    handler = handlers.get(kind)
    if handler is None:
        raise HTTPException(status_code=404, detail=f"unknown suggestion kind '{kind}'")
    try:
        items = await handler(session.copy)
    except MissingInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"kind": kind, "items": items}


@app.post("/creatives/generate")
async def generate_creatives():
    try:
        await session.generate()
    except MissingInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AssetDecodeError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _state()


@app.get("/creatives.zip")
def download_all():
    creatives = session.orchestrator.creatives
    if not creatives:
        raise HTTPException(status_code=404, detail="creatives not ready")
    headers = {"Content-Disposition": 'attachment; filename="adgen-creatives.zip"'}
    return Response(content=export_zip(creatives), media_type="application/zip", headers=headers)


@app.get("/creatives/{format_name}")
def download_creative(format_name: str):
    try:
        format_by_name(format_name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"unknown format '{format_name}'")
    creative = session.orchestrator.creatives.get(format_name)
    if creative is None:
        raise HTTPException(status_code=404, detail="creative not ready")
    headers = {"Content-Disposition": f'attachment; filename="{export_filename(creative)}"'}
    return Response(content=creative.png, media_type="image/png", headers=headers)


@app.post("/compliance")
async def compliance(enrich: bool = Form(False)):
    orch = session.orchestrator
    result = orch.check_compliance(session.copy)
    if enrich:
        result = await enrich_compliance_report(session.copy, result, orch.text_service)
    return {"passed": result.passed, "score": result.score, "report": result.report}


@app.post("/reset")
def reset():
    session.reset()
    return _state()
