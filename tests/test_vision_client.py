# tests/test_vision_client.py
from types import SimpleNamespace

import httpx
import openai
import pytest

from stockmeta.core.errors import EmptyResponse, UpstreamError
from stockmeta.services.vision_client import OpenAIVisionClient, extract_output_text

pytestmark = pytest.mark.anyio

_REQ = httpx.Request("POST", "https://api.openai.com/v1/responses")


class _FakeResponses:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.result


class _FakeOpenAI:
    def __init__(self, result=None, error=None):
        self.responses = _FakeResponses(result, error)
        self.closed = False

    async def close(self):
        self.closed = True


def _client(fake, **kwargs) -> OpenAIVisionClient:
    return OpenAIVisionClient(api_key="sk-test", client=fake, **kwargs)


async def test_generate_sends_text_and_image_parts():
    fake = _FakeOpenAI(SimpleNamespace(output_text='  {"title": "x"}  '))
    client = _client(fake, model="gpt-4.1-mini", max_output_tokens=400)

    raw = await client.generate("PROMPT", "data:image/png;base64,AAAA")
    assert raw == '{"title": "x"}'

    kwargs = fake.responses.kwargs
    assert kwargs["model"] == "gpt-4.1-mini"
    assert kwargs["max_output_tokens"] == 400
    content = kwargs["input"][0]["content"]
    assert content[0] == {"type": "input_text", "text": "PROMPT"}
    assert content[1]["type"] == "input_image"
    assert content[1]["image_url"] == "data:image/png;base64,AAAA"
    fmt = kwargs["text"]["format"]
    assert fmt["type"] == "json_schema" and fmt["name"] == "stock_meta"
    assert fmt["schema"]["required"] == ["title", "keywords", "category"]


async def test_structured_output_can_be_disabled():
    fake = _FakeOpenAI(SimpleNamespace(output_text="{}"))
    await _client(fake, structured_output=False).generate("p", "data:image/jpeg;base64,AA")
    assert "text" not in fake.responses.kwargs


def test_output_text_falls_back_to_output_items():
    resp = SimpleNamespace(
        output_text="",
        output=[SimpleNamespace(content=[SimpleNamespace(text='{"category": 3}')])],
    )
    assert extract_output_text(resp) == '{"category": 3}'
    assert extract_output_text(SimpleNamespace()) == ""


async def test_blank_output_raises_empty_response():
    fake = _FakeOpenAI(SimpleNamespace(output_text="   ", output=[]))
    with pytest.raises(EmptyResponse):
        await _client(fake).generate("p", "data:image/jpeg;base64,AA")


async def test_status_error_becomes_upstream_error_with_status():
    err = openai.RateLimitError(
        "Rate limit reached",
        response=httpx.Response(429, request=_REQ),
        body=None,
    )
    fake = _FakeOpenAI(error=err)
    with pytest.raises(UpstreamError) as exc_info:
        await _client(fake).generate("p", "data:image/jpeg;base64,AA")
    assert exc_info.value.upstream_status == 429
    assert "429" in exc_info.value.detail
    assert exc_info.value.to_payload()["upstream_status"] == 429


async def test_connection_error_becomes_upstream_error():
    fake = _FakeOpenAI(error=openai.APIConnectionError(request=_REQ))
    with pytest.raises(UpstreamError) as exc_info:
        await _client(fake).generate("p", "data:image/jpeg;base64,AA")
    assert exc_info.value.upstream_status is None
    assert "upstream_status" not in exc_info.value.to_payload()


async def test_aclose_closes_underlying_client():
    fake = _FakeOpenAI()
    await _client(fake).aclose()
    assert fake.closed is True
