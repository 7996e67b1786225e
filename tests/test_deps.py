# tests/test_deps.py
import asyncio
import inspect

import pytest

from stockmeta.core import deps
from stockmeta.core.config import settings
from stockmeta.services.vision_client import OpenAIVisionClient

pytestmark = pytest.mark.anyio


@pytest.fixture
def fresh_client_slot(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(deps, "_vision_client", None)


def test_vision_client_dependency_runs_on_event_loop():
    # sync 依賴會被丟到 threadpool，lazy-init 就可能同時建立兩個 client
    assert inspect.iscoroutinefunction(deps.get_vision_client)


async def test_concurrent_requests_share_one_vision_client(fresh_client_slot):
    first, second = await asyncio.gather(deps.get_vision_client(), deps.get_vision_client())

    assert isinstance(first, OpenAIVisionClient)
    assert first is second
    assert deps._vision_client is first
    await first.aclose()


async def test_no_api_key_yields_no_client(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(deps, "_vision_client", None)

    assert await deps.get_vision_client() is None
    assert deps._vision_client is None
