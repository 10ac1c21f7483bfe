"""DeepSeek客户端测试"""

import json

import httpx
import pytest

from careerai.integrations.llm_client import DeepSeekClient, LLMAPIError
from careerai.core.nlp_service import NLPService
from careerai.models.resume import ResumeProfile


def _client(handler, api_key="test-key"):
    return DeepSeekClient(
        api_key=api_key,
        base_url="https://llm.test/v1",
        model="deepseek-chat",
        transport=httpx.MockTransport(handler)
    )


async def test_generate_text_returns_message_content():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["payload"] = json.loads(request.content)
        return httpx.Response(200, json={
            "choices": [{"message": {"content": "hello"}}],
            "usage": {"total_tokens": 3}
        })

    async with _client(handler) as client:
        text = await client.generate_text("Say hello", temperature=0.2, max_tokens=50)

    assert text == "hello"
    assert captured["url"] == "https://llm.test/v1/chat/completions"
    assert captured["auth"] == "Bearer test-key"
    assert captured["payload"]["temperature"] == 0.2
    assert captured["payload"]["max_tokens"] == 50
    assert captured["payload"]["messages"] == [{"role": "user", "content": "Say hello"}]


async def test_missing_api_key_fails_without_request():
    def handler(request):
        raise AssertionError("不应发出请求")

    client = _client(handler, api_key="")
    with pytest.raises(LLMAPIError):
        await client.generate_text("anything")
    await client.close()


async def test_client_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(401, json={"error": "invalid key"})

    async with _client(handler) as client:
        with pytest.raises(LLMAPIError):
            await client.generate_text("anything")

    assert len(calls) == 1


async def test_unexpected_payload_shape():
    async with _client(lambda request: httpx.Response(200, json={"choices": []})) as client:
        with pytest.raises(LLMAPIError):
            await client.generate_text("anything")


async def test_non_json_body_raises_api_error():
    async with _client(lambda request: httpx.Response(200, text="oops")) as client:
        with pytest.raises(LLMAPIError):
            await client.generate_text("anything")


async def test_non_json_body_falls_back_to_template_brief():
    async with _client(lambda request: httpx.Response(200, text="oops")) as client:
        service = NLPService(llm_client=client)
        brief = await service.generate_candidate_brief(ResumeProfile(name="Jane Smith", skills=["Python"]))
        questions = await service.generate_questions("Backend Engineer")

    assert brief.startswith("Jane Smith is a professional")
    assert questions
