import asyncio
import sys
from pathlib import Path

import pytest

# This repo uses a src/ layout; make the package importable without an
# editable install.
_SRC = str(Path(__file__).resolve().parents[1] / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


def chat_body(content: str) -> dict:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "test-model",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class FakeGateway:
    """Scripted stand-in for ProviderGateway.

    `responses` maps a provider name ("primary"/"fast") to a queue of items:
    a str becomes a chat completion body, a dict is returned as-is and an
    exception instance is raised.
    """

    def __init__(self, *, primary_key="pk", fast_key="fk", responses=None):
        from clipai.llm.factory import fast_config, primary_config
        from clipai.llm.types import ProviderName

        self._configs = {
            ProviderName.PRIMARY: primary_config(primary_key),
            ProviderName.FAST: fast_config(fast_key),
        }
        responses = responses or {}
        self.queues = {
            ProviderName.PRIMARY: list(responses.get("primary", [])),
            ProviderName.FAST: list(responses.get("fast", [])),
        }
        self.calls = []

    def config_for(self, name):
        return self._configs[name]

    def has_credential(self, name):
        return self._configs[name].is_configured

    def has_any_credential(self):
        return any(c.is_configured for c in self._configs.values())

    async def send(self, endpoint, payload, provider, attempt=0):
        from clipai.llm.errors import MissingCredentialError

        self.calls.append((provider.name.value, endpoint, payload))
        if not provider.is_configured:
            raise MissingCredentialError(f"{provider.label} API key not set.")
        queue = self.queues[provider.name]
        if not queue:
            raise AssertionError(f"unexpected call to {provider.name.value}")
        item = queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, str):
            return chat_body(item)
        return item

    def providers_called(self):
        return [name for name, _, _ in self.calls]


@pytest.fixture
def make_gateway():
    """Fixture: factory for FakeGateway."""

    def _factory(**kwargs):
        return FakeGateway(**kwargs)

    return _factory


@pytest.fixture
def make_orchestrator():
    """Fixture: factory returning (orchestrator, fake_gateway)."""

    def _factory(**kwargs):
        from clipai.llm.orchestrator import FallbackOrchestrator

        gateway = FakeGateway(**kwargs)
        return FallbackOrchestrator(gateway), gateway

    return _factory


@pytest.fixture
def run():
    """Fixture: run a coroutine to completion."""

    return asyncio.run


@pytest.fixture
def no_sleep(monkeypatch):
    """Fixture: record retry delays instead of sleeping."""

    delays = []

    async def _sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr("clipai.llm._retry.asyncio.sleep", _sleep)
    return delays
