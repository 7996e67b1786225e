# stockmeta/services/vision_client.py
"""
Vision 模型呼叫（OpenAI Responses API）。
核心流程只依賴 MetadataGenerator 介面：generate(prompt, image_data_uri) -> 原始文字，
測試時可以換成回傳固定字串的假物件，不需連網。
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from openai import APIError, APIStatusError, AsyncOpenAI

from stockmeta.core.errors import EmptyResponse, UpstreamError

logger = logging.getLogger(__name__)

STOCK_META_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "keywords": {"type": "array", "items": {"type": "string"}},
        "category": {"type": "integer"},
    },
    "required": ["title", "keywords", "category"],
    "additionalProperties": False,
}


class MetadataGenerator(Protocol):
    async def generate(self, prompt: str, image_data_uri: str) -> str:
        ...


def extract_output_text(response: Any) -> str:
    """先取 output_text；沒有的話從 output[].content[] 找第一段文字"""
    text = getattr(response, "output_text", None)
    if text:
        return text

    for item in getattr(response, "output", None) or []:
        for part in getattr(item, "content", None) or []:
            part_text = getattr(part, "text", None)
            if part_text:
                return part_text
    return ""


class OpenAIVisionClient:
    """OpenAI vision 呼叫；不重試，逾時交給平台或設定值"""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1-mini",
        max_output_tokens: int = 800,
        image_detail: str = "auto",
        structured_output: bool = True,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.image_detail = image_detail
        self.structured_output = structured_output

        if client is None:
            kwargs: Dict[str, Any] = {"api_key": api_key, "max_retries": 0}
            if base_url:
                kwargs["base_url"] = base_url
            if timeout is not None:
                kwargs["timeout"] = timeout
            client = AsyncOpenAI(**kwargs)
        self._client = client

    @classmethod
    def from_settings(cls, s) -> "OpenAIVisionClient":
        return cls(
            api_key=s.OPENAI_API_KEY,
            model=s.OPENAI_MODEL,
            max_output_tokens=s.OPENAI_MAX_OUTPUT_TOKENS,
            image_detail=s.OPENAI_IMAGE_DETAIL,
            structured_output=s.OPENAI_STRUCTURED_OUTPUT,
            base_url=s.OPENAI_BASE_URL,
            timeout=s.OPENAI_TIMEOUT_SEC,
        )

    def _request_kwargs(self, prompt: str, image_data_uri: str) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {
                            "type": "input_image",
                            "image_url": image_data_uri,
                            "detail": self.image_detail,
                        },
                    ],
                }
            ],
            "max_output_tokens": self.max_output_tokens,
        }
        if self.structured_output:
            kwargs["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": "stock_meta",
                    "schema": STOCK_META_SCHEMA,
                    "strict": True,
                }
            }
        return kwargs

    async def generate(self, prompt: str, image_data_uri: str) -> str:
        try:
            response = await self._client.responses.create(**self._request_kwargs(prompt, image_data_uri))
        except APIStatusError as e:
            detail = e.message or str(e)
            logger.error("OpenAI API error: %s %s", e.status_code, detail)
            raise UpstreamError(f"OpenAI API error: {e.status_code} {detail}", upstream_status=e.status_code) from e
        except APIError as e:
            logger.error("OpenAI request failed: %s", e)
            raise UpstreamError(f"OpenAI request failed: {e}") from e

        raw = extract_output_text(response).strip()
        if not raw:
            raise EmptyResponse("Empty response from OpenAI")
        return raw

    async def aclose(self) -> None:
        await self._client.close()
