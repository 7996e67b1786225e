# stockmeta/core/deps.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI

from stockmeta.core.config import settings
from stockmeta.services.analyzer import MetadataAnalyzer
from stockmeta.services.normalizer import NormalizationPolicy
from stockmeta.services.vision_client import MetadataGenerator, OpenAIVisionClient

logger = logging.getLogger(__name__)

# 單例 OpenAI client（lazy-init，關機時由 lifespan 關閉）
_vision_client: Optional[OpenAIVisionClient] = None


async def get_vision_client() -> Optional[MetadataGenerator]:
    """
    FastAPI 依賴：回傳共用的 vision client。
    沒有設定 OPENAI_API_KEY 時回傳 None，由 analyzer 轉成 configuration_error。
    async def：在 event loop 上執行，檢查與建立之間沒有 await，不會重複建立 client。
    """
    global _vision_client
    if not settings.OPENAI_API_KEY:
        return None
    if _vision_client is None:
        _vision_client = OpenAIVisionClient.from_settings(settings)
    return _vision_client


def get_policy() -> NormalizationPolicy:
    return NormalizationPolicy.from_settings(settings)


def get_analyzer(
    generator: Optional[MetadataGenerator] = Depends(get_vision_client),
    policy: NormalizationPolicy = Depends(get_policy),
) -> MetadataAnalyzer:
    return MetadataAnalyzer(
        generator=generator,
        policy=policy,
        max_image_chars=settings.MAX_IMAGE_BASE64_CHARS,
        override_category=settings.CATEGORY_OVERRIDE_ENABLED,
    )


@asynccontextmanager
async def lifespan_clients(app: FastAPI) -> AsyncGenerator[None, None]:
    """FastAPI lifespan：關機時關閉 OpenAI 的 HTTP 連線池。"""
    global _vision_client
    try:
        yield
    finally:
        if _vision_client is not None:
            await _vision_client.aclose()
            _vision_client = None
            logger.info("OpenAI client closed")
