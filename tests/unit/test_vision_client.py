"""Unit tests for the bill image extraction client"""

import json
import httpx
import pytest
from finance_gateway.domain.exceptions import ExtractionError
from finance_gateway.infrastructure.clients.vision import VisionClient


def make_client(handler, api_key: str = "sk-test") -> VisionClient:
    return VisionClient(
        api_url="https://vision.test/v1/chat/completions",
        api_key=api_key,
        model="test-model",
        transport=httpx.MockTransport(handler),
    )


async def test_describe_image_returns_reply_content():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"choices": [{"message": {"content": '{"name": "Water"}'}}]})

    reply = await make_client(handler).describe_image("QUJD", "image/jpeg")

    assert reply == '{"name": "Water"}'
    body = json.loads(requests[0].content)
    assert body["model"] == "test-model"
    assert requests[0].headers["Authorization"] == "Bearer sk-test"


async def test_missing_api_key():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ExtractionError):
        await make_client(handler, api_key="").describe_image("QUJD", "image/jpeg")


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, content=b"not json"),
    ],
)
async def test_bad_responses_raise_extraction_error(response):
    with pytest.raises(ExtractionError):
        await make_client(lambda request: response).describe_image("QUJD", "image/jpeg")


async def test_timeout_raises_extraction_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out")

    with pytest.raises(ExtractionError):
        await make_client(handler).describe_image("QUJD", "image/jpeg")
