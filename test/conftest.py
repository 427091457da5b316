import httpx
import pytest

from cryptography.fernet import Fernet

from api.backend import BackendAPI
from llm.llm_client import LLMClient
from storage.credentials import CredentialResolver
from storage.settings_store import SettingsStore
from storage.task_store import InMemoryTaskStore


class FakeProvider:
    provider_id = "fake"

    def __init__(self, response_text: str):
        self._response_text = response_text
        self.prompts = []

    def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self._response_text


class FakeRecognizer:
    def __init__(self, text: str = "", error: Exception = None):
        self.text = text
        self.error = error
        self.calls = 0

    def transcribe(self, audio, language):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


def no_network_transport():
    def handler(request):
        raise AssertionError(f"unexpected network call to {request.url}")
    return httpx.MockTransport(handler)


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str):
        return FakeProvider(response_text)
    return _make


@pytest.fixture
def fake_llm_factory(fake_provider_factory):
    def _make(response_text: str):
        return LLMClient(provider=fake_provider_factory(response_text))
    return _make


@pytest.fixture
def settings_store(tmp_path):
    return SettingsStore(path=str(tmp_path / "settings"), encryption_key=Fernet.generate_key().decode())


@pytest.fixture
def credentials(settings_store):
    return CredentialResolver(settings_store)


@pytest.fixture
def backend(settings_store):
    return BackendAPI(settings_store=settings_store, task_store=InMemoryTaskStore())
