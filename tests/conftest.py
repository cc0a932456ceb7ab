from io import BytesIO

import pytest
from PIL import Image

from adgen_studio.models import AssetSet, CampaignCopy


def make_png(size=(64, 64), color=(255, 0, 0, 255)) -> bytes:
    buf = BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def product_png():
    return make_png((80, 120), (220, 30, 30, 255))


@pytest.fixture
def logo_png():
    return make_png((40, 40), (20, 40, 230, 255))


@pytest.fixture
def assets(product_png, logo_png):
    return AssetSet(product_image=product_png, logo_image=logo_png, brand_color="#21808d")


@pytest.fixture
def copy():
    return CampaignCopy(headline="Summer Sale", cta="Shop Today")
