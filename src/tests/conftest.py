"""Pytest fixtures and config."""
import copy
import json
import sys
from pathlib import Path

import httpx
import pytest

# ensure src is on path when running tests from repo root (src/tests/conftest.py -> root = repo, src = root/src)
root = Path(__file__).resolve().parent.parent.parent
src = root / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from call_insights.llm.client import ClientConfig  # noqa: E402
from call_insights.services.extraction import TranscriptAnalyzer  # noqa: E402

ENDPOINT = "https://contoso.openai.azure.com"
API_KEY = "test-key"
DEPLOYMENT = "gpt-4o-analysis"

VALID_ANALYSIS = {
    "sentiment": "negative",
    "escalationRisk": "medium",
    "primaryIntent": "missing_order",
    "keyInformation": {
        "orderNumber": "12345",
        "customerEmail": "",
        "productSKU": "",
        "issueDate": "",
        "customerPhone": "",
    },
    "suggestedActions": ["track_shipment", "offer_replacement"],
    "commitments": [],
    "confidenceScore": 0.9,
    "summary": "Customer reports order 12345 never arrived.",
}


class RecordingTransport:
    """Подмена транспорта SDK: отдаёт заготовленные ответы по очереди и запоминает запросы."""

    def __init__(self, responses: list):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request #{len(self.requests)}: {request.url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


def completion_response(content: str | None, finish_reason: str = "stop") -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "gpt-4o",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content, "refusal": None},
                    "finish_reason": finish_reason,
                }
            ],
            "usage": {"prompt_tokens": 120, "completion_tokens": 80, "total_tokens": 200},
        },
    )


def analysis_response(data: dict | None = None, finish_reason: str = "stop") -> httpx.Response:
    return completion_response(json.dumps(data if data is not None else VALID_ANALYSIS), finish_reason)


def error_response(status: int, message: str, *, param: str | None = None, code: str | None = None) -> httpx.Response:
    return httpx.Response(
        status,
        json={"error": {"message": message, "type": "invalid_request_error", "param": param, "code": code}},
    )


def unsupported_max_tokens_response() -> httpx.Response:
    return error_response(
        400,
        "Unsupported parameter: 'max_tokens' is not supported with this model. "
        "Use 'max_completion_tokens' instead.",
        param="max_tokens",
        code="unsupported_parameter",
    )


@pytest.fixture
def valid_analysis() -> dict:
    return copy.deepcopy(VALID_ANALYSIS)


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(endpoint=ENDPOINT, api_key=API_KEY, deployment=DEPLOYMENT)


@pytest.fixture
def make_analyzer(client_config):
    """Фабрика: (analyzer, transport) с записывающим MockTransport вместо сети."""
    clients: list[httpx.Client] = []

    def _make(responses: list, *, config: ClientConfig | None = None, strict_validation: bool = True):
        transport = RecordingTransport(responses)
        http_client = httpx.Client(transport=httpx.MockTransport(transport))
        clients.append(http_client)
        analyzer = TranscriptAnalyzer(
            config or client_config,
            http_client=http_client,
            strict_validation=strict_validation,
        )
        return analyzer, transport

    yield _make
    for c in clients:
        c.close()
