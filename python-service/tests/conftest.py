import pytest
from fastapi.testclient import TestClient

from main import app, get_affiliate_partners, get_generation_client, get_settings
from models.curation import CurationSettings, LinkMode
from services.affiliate_resolver import DEFAULT_AFFILIATE_PARTNERS


class FakeGenerationClient:
    """Records prompts and replays a canned response (or raises)."""

    def __init__(self, output="", error=None):
        self.output = output
        self.error = error
        self.calls = []

    async def generate(self, prompt, max_output_tokens):
        self.calls.append((prompt, max_output_tokens))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def partners():
    return DEFAULT_AFFILIATE_PARTNERS


@pytest.fixture
def settings():
    return CurationSettings(model_name="test-model", max_output_tokens=900, link_mode=LinkMode.STRICT)


@pytest.fixture
def fake_client():
    return FakeGenerationClient()


@pytest.fixture
def client(fake_client, partners, settings):
    app.dependency_overrides[get_generation_client] = lambda: fake_client
    app.dependency_overrides[get_affiliate_partners] = lambda: partners
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()
