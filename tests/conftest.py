# tests/conftest.py
import os
from typing import List, Optional, Tuple

import pytest
from httpx import AsyncClient, ASGITransport

# ---- 測試期環境變數（先於 app 載入）----
os.environ.setdefault("ENV", "test")

from stockmeta.main import app  # noqa: E402
from stockmeta.core.deps import get_vision_client  # noqa: E402


class FakeGenerator:
    """固定回傳文字（或拋出指定錯誤）的假 vision client，並記錄每次呼叫"""

    def __init__(self, text: str = "", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def generate(self, prompt: str, image_data_uri: str) -> str:
        self.calls.append((prompt, image_data_uri))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture(scope="session")
def anyio_backend():
    """讓 pytest 使用 asyncio event loop。"""
    return "asyncio"


@pytest.fixture
async def client():
    """使用 ASGITransport 直接掛載 app，不需啟動伺服器。"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def use_generator():
    """
    用法：gen = use_generator('{"title": ...}') 或 use_generator(error=UpstreamError(...))
    missing=True 代表「未設定 OPENAI_API_KEY」。
    """
    def _install(text: str = "", error: Optional[Exception] = None, missing: bool = False):
        generator = None if missing else FakeGenerator(text, error)
        app.dependency_overrides[get_vision_client] = lambda: generator
        return generator

    yield _install
    app.dependency_overrides.pop(get_vision_client, None)
