import pytest

from adgen_studio.session import STEP_ASSETS, STEP_CAMPAIGN, STEP_CREATIVES, StudioSession


def test_wizard_needs_both_images_to_continue(product_png, logo_png):
    session = StudioSession()
    session.upload("product", product_png)

    assert not session.can_continue()
    with pytest.raises(ValueError):
        session.go_to(STEP_CAMPAIGN)

    session.upload("logo", logo_png)
    session.go_to(STEP_CAMPAIGN)
    assert session.step == STEP_CAMPAIGN


def test_unknown_upload_field_rejected():
    with pytest.raises(ValueError):
        StudioSession().upload("banner", b"x")


def test_update_copy_replaces_fields():
    session = StudioSession()
    session.update_copy(headline="Sale", cta="Buy")
    session.update_copy(cta="Shop")

    assert (session.copy.headline, session.copy.cta) == ("Sale", "Shop")


@pytest.mark.asyncio
async def test_generate_moves_to_creatives_and_reset_clears(product_png, logo_png):
    session = StudioSession()
    session.upload("product", product_png)
    session.upload("logo", logo_png)
    session.set_brand_color("#112233")
    session.update_copy(headline="Sale")

    creatives = await session.generate()

    assert len(creatives) == 3
    assert session.step == STEP_CREATIVES

    session.reset()

    assert session.step == STEP_ASSETS
    assert session.assets.product_image is None
    assert session.assets.brand_color == "#21808d"
    assert session.copy.headline == ""
    assert session.orchestrator.creatives == {}
