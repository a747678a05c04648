import json
import logging

import pytest

from errors import GenerationFailure, MissingProductsArrayError, NotJSONError
from models.curation import CurationSettings, LinkMode
from models.gift import GiftRequest, LinkRef
from services.curation_service import curate_gifts

HAT = {
    "title": "Will & Bear Explorer Hat",
    "why": "A wool felt hat made for long walks.",
    "price_note": "Approx $150",
    "links": [{"label": "Hat Shop", "url": "https://hats.example.com/s?q=explorer"}],
}
WALLET = {
    "title": "Leather Wallet",
    "why": "Slim and practical.",
    "price_note": "Approx $60",
    "links": [
        {"label": "Amazon AU", "url": "https://www.amazon.com.au/s?k=wallet"},
        {"label": "David Jones", "url": "https://www.davidjones.com/search?q=wallet"},
    ],
}


@pytest.fixture
def gift_request():
    return GiftRequest(recipient="my dad", occasion="birthday", budget_text="under $100")


async def test_full_pipeline(gift_request, fake_client, partners, settings):
    fake_client.output = "```json\n" + json.dumps({"products": [HAT, WALLET]}) + "\n```"

    result = await curate_gifts(gift_request, fake_client, partners, settings)

    assert [p.title for p in result.products] == ["Will & Bear Explorer Hat", "Leather Wallet"]
    assert result.products[0].links == [LinkRef(label="Will & Bear", url=partners[0].affiliate_url)]
    assert result.products[1].links == [
        LinkRef(label="Amazon AU", url="https://www.amazon.com.au/s?k=wallet")
    ]


async def test_sends_directive_with_output_hint(gift_request, fake_client, partners, settings):
    fake_client.output = '{"products": []}'

    await curate_gifts(gift_request, fake_client, partners, settings)

    [(prompt, max_output_tokens)] = fake_client.calls
    assert "Recipient: my dad" in prompt
    assert "Return EXACTLY 3 product suggestions." in prompt
    assert max_output_tokens == 900


async def test_affiliate_override_disabled(gift_request, fake_client, partners):
    settings = CurationSettings(link_mode=LinkMode.PERMISSIVE, affiliate_override=False)
    fake_client.output = json.dumps({"products": [HAT, WALLET]})

    result = await curate_gifts(gift_request, fake_client, partners, settings)

    assert result.products[0].links[0].label == "Hat Shop"
    assert len(result.products[1].links) == 2


async def test_not_json_propagates(gift_request, fake_client, partners, settings):
    fake_client.output = "Sorry, I can't help with that."
    with pytest.raises(NotJSONError):
        await curate_gifts(gift_request, fake_client, partners, settings)


async def test_missing_products_propagates(gift_request, fake_client, partners, settings):
    fake_client.output = '{"ideas": []}'
    with pytest.raises(MissingProductsArrayError):
        await curate_gifts(gift_request, fake_client, partners, settings)


async def test_generation_failure_propagates(gift_request, fake_client, partners, settings):
    fake_client.error = GenerationFailure("boom")
    with pytest.raises(GenerationFailure):
        await curate_gifts(gift_request, fake_client, partners, settings)


async def test_unexpected_client_error_becomes_generation_failure(
    gift_request, fake_client, partners, settings
):
    fake_client.error = ConnectionError("network down")
    with pytest.raises(GenerationFailure) as exc_info:
        await curate_gifts(gift_request, fake_client, partners, settings)
    assert isinstance(exc_info.value.__cause__, ConnectionError)


async def test_rejected_output_logged_once(gift_request, fake_client, partners, settings, caplog):
    fake_client.output = "Not JSON at all"

    with caplog.at_level(logging.DEBUG):
        with pytest.raises(NotJSONError):
            await curate_gifts(gift_request, fake_client, partners, settings)

    rejected = [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert len(rejected) == 1
    assert "generation_output_rejected" in rejected[0].getMessage()
    assert "Not JSON at all" in rejected[0].getMessage()
