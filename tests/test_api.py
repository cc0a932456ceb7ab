import io
import zipfile

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from adgen_studio.api import app as app_module
from adgen_studio.campaign import CampaignOrchestrator
from adgen_studio.session import StudioSession


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(app_module, "session", StudioSession(CampaignOrchestrator(text_service=None)))
    return TestClient(app_module.app)


def _upload(client, field, data):
    return client.post(f"/assets/{field}", files={"file": (f"{field}.png", data, "image/png")})


def test_full_wizard_flow(client, product_png, logo_png):
    assert _upload(client, "product", product_png).status_code == 200
    assert _upload(client, "logo", logo_png).status_code == 200
    assert client.post("/assets/brand-color", data={"color": "#ff8800"}).json()["assets"]["brand_color"] == "#ff8800"
    state = client.post("/campaign", data={"headline": "Sale", "cta": "Shop Now", "tone": "Urgent"}).json()
    assert state["campaign"]["tone"] == "Urgent"

    state = client.post("/creatives/generate").json()
    assert state["step"] == 3
    assert set(state["creatives"]) == {"facebook", "instagram", "display"}

    resp = client.get("/creatives/display")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert 'filename="adgen-display-' in resp.headers["content-disposition"]
    assert Image.open(io.BytesIO(resp.content)).size == (1200, 628)

    resp = client.get("/creatives.zip")
    with zipfile.ZipFile(io.BytesIO(resp.content)) as zf:
        assert len(zf.namelist()) == 3


def test_generate_without_logo_is_400(client, product_png):
    _upload(client, "product", product_png)
    client.post("/campaign", data={"headline": "Sale"})

    resp = client.post("/creatives/generate")

    assert resp.status_code == 400
    assert "logo_image" in resp.json()["detail"]
    assert client.get("/state").json()["creatives"] == {}


def test_corrupt_product_is_422(client, logo_png):
    _upload(client, "product", b"corrupt bytes")
    _upload(client, "logo", logo_png)
    client.post("/campaign", data={"headline": "Sale"})

    resp = client.post("/creatives/generate")

    assert resp.status_code == 422
    assert client.get("/creatives/facebook").status_code == 404


def test_unknown_routes_targets(client):
    assert _upload(client, "banner", b"x").status_code == 404
    assert client.get("/creatives/tiktok").status_code == 404
    assert client.post("/suggestions/colors").status_code == 404
    assert client.post("/assets/brand-color", data={"color": "nope"}).status_code == 400
    assert client.post("/campaign", data={"theme": "Grunge"}).status_code == 400


def test_suggestions_fall_back(client):
    client.post("/campaign", data={"headline": "Sale"})

    body = client.post("/suggestions/headlines").json()

    assert "Sale - Limited Time!" in body["items"]
    assert client.get("/state").json()["suggestions"]["headlines"] == body["items"]


def test_compliance_and_reset(client):
    client.post("/campaign", data={"headline": "Buy Now", "cta": "Shop Today"})

    body = client.post("/compliance").json()
    assert (body["passed"], body["score"]) == (True, 98)

    state = client.post("/reset").json()
    assert state["campaign"]["headline"] == ""
    assert state["step"] == 1


def test_step_navigation_requires_both_images(client, product_png, logo_png):
    _upload(client, "product", product_png)
    assert client.post("/step", data={"step": 2}).status_code == 400

    _upload(client, "logo", logo_png)
    assert client.post("/step", data={"step": 2}).json()["step"] == 2

    # Creatives step opens only once something has been generated.
    assert client.post("/step", data={"step": 3}).status_code == 400
    assert client.post("/step", data={"step": 7}).status_code == 400
    assert client.post("/step", data={"step": 1}).json()["step"] == 1
