"""Multimodal chat completion client used to read bill images"""

import httpx
from typing import Any, Dict
from finance_gateway.config import settings
from finance_gateway.domain.exceptions import ExtractionError
from finance_gateway.domain.extraction import build_request
from finance_gateway.infrastructure.observability.metrics import extraction_failure_counter, extraction_latency_histogram


class VisionClient:
    """Client for an OpenAI-compatible chat completions endpoint"""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url or settings.vision_api_url
        self.api_key = api_key if api_key is not None else settings.vision_api_key
        self.model = model or settings.vision_model
        self.timeout = timeout or max(settings.http_timeout_seconds, 30.0)
        self.transport = transport

    async def describe_image(self, image_base64: str, mime_type: str) -> str:
        """
        Send the image with the extraction prompt and return the model's reply text.

        Raises:
            ExtractionError: missing API key, timeout, HTTP error or malformed response
        """
        if not self.api_key:
            extraction_failure_counter.inc()
            raise ExtractionError("Vision API key is not configured")

        payload: Dict[str, Any] = build_request(image_base64, mime_type, self.model)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with extraction_latency_histogram.time():
                    response = await client.post(
                        self.api_url,
                        json=payload,
                        headers={"Authorization": f"Bearer {self.api_key}"},
                    )
                    response.raise_for_status()
                data = response.json()
                return data["choices"][0]["message"]["content"] or ""

            except httpx.TimeoutException as e:
                extraction_failure_counter.inc()
                raise ExtractionError(f"Vision API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                extraction_failure_counter.inc()
                raise ExtractionError(f"Vision API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                extraction_failure_counter.inc()
                raise ExtractionError(f"Vision API unreachable: {e}") from e
            except (KeyError, IndexError, ValueError, TypeError) as e:
                extraction_failure_counter.inc()
                raise ExtractionError(f"Invalid response from vision API: {e}") from e
