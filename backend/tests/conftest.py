import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from mixology import main
from mixology.api import deps
from mixology.config import DEFAULT_CATALOG_PATH
from mixology.services.catalog.loader import load_catalog
from mixology.services.llm.providers import ProviderChain, TextProvider


class FakeProvider(TextProvider):
    """Returns canned replies and records the prompts it was given."""

    def __init__(self, reply: str = "", name: str = "fake", supports_vision: bool = True, error: Exception | None = None):
        self.name = name
        self.model = "fake-model"
        self.supports_vision = supports_vision
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def complete(self, system: str, user: str) -> str:
        self.calls.append((system, user))
        if self.error is not None:
            raise self.error
        return self.reply

    def describe_image(self, image_base64: str, prompt: str) -> str:
        self.calls.append((image_base64, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture(name="catalog", scope="session")
def catalog_fixture():
    return load_catalog(DEFAULT_CATALOG_PATH)


@pytest.fixture(name="fake_provider")
def fake_provider_fixture():
    return FakeProvider()


@pytest.fixture(name="client")
def client_fixture(catalog, fake_provider):
    chain = ProviderChain([fake_provider])
    main.app.dependency_overrides[deps.get_catalog] = lambda: catalog
    main.app.dependency_overrides[deps.get_text_chain] = lambda: chain
    main.app.dependency_overrides[deps.get_vision_chain] = lambda: chain
    client = TestClient(main.app)
    yield client
    main.app.dependency_overrides.clear()
