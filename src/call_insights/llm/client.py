"""
Клиент Azure OpenAI: конфигурация, профили параметров генерации и один вызов chat.completions.

Профиль legacy (temperature + max_tokens) принимают старые поколения моделей,
alternate (max_completion_tokens без temperature) принимают новые. Выбор делает сервис извлечения.
"""
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from openai import APIStatusError, AzureOpenAI
from openai.types.chat import ChatCompletion

from call_insights.settings import DEFAULT_API_VERSION, Settings

logger = logging.getLogger(__name__)

LEGACY = "legacy"
ALTERNATE = "alternate"

_MISMATCH_MARKERS = ("max_tokens", "temperature")


@dataclass(frozen=True)
class ClientConfig:
    """Неизменяемая конфигурация подключения. Собирается один раз при старте процесса."""

    endpoint: str = ""
    api_key: str = field(default="", repr=False)
    deployment: str = ""
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 60.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientConfig":
        return cls(
            endpoint=settings.azure_openai_endpoint.strip().rstrip("/"),
            api_key=settings.azure_openai_key.strip(),
            deployment=settings.azure_openai_deployment.strip(),
            api_version=settings.azure_openai_api_version or DEFAULT_API_VERSION,
            timeout=settings.llm_timeout,
        )

    @property
    def missing(self) -> list[str]:
        names = {
            "AZURE_OPENAI_ENDPOINT": self.endpoint,
            "AZURE_OPENAI_KEY": self.api_key,
            "AZURE_OPENAI_DEPLOYMENT": self.deployment,
        }
        return [name for name, value in names.items() if not value]

    @property
    def is_ready(self) -> bool:
        return not self.missing


@dataclass(frozen=True)
class ParameterProfile:
    """Набор параметров генерации, совместимый с одним поколением моделей."""

    name: str
    params: dict[str, Any]


LEGACY_PROFILE = ParameterProfile(LEGACY, {"temperature": 0.1, "max_tokens": 1000})
ALTERNATE_PROFILE = ParameterProfile(ALTERNATE, {"max_completion_tokens": 2000})


def is_parameter_mismatch(exc: BaseException) -> bool:
    """400 с упоминанием max_tokens/temperature: модель не принимает параметры legacy-профиля."""
    if not isinstance(exc, APIStatusError) or exc.status_code != 400:
        return False
    message = str(getattr(exc, "message", "") or exc)
    return any(marker in message for marker in _MISMATCH_MARKERS)


def make_client(config: ClientConfig, http_client: httpx.Client | None = None) -> AzureOpenAI:
    # Ретраи SDK отключены: единственный повтор это смена профиля параметров
    return AzureOpenAI(
        azure_endpoint=config.endpoint,
        azure_deployment=config.deployment,
        api_key=config.api_key,
        api_version=config.api_version,
        timeout=config.timeout,
        max_retries=0,
        http_client=http_client,
    )


def _log_api_error(e: APIStatusError, *, deployment: str, profile: str) -> None:
    url = str(e.response.url) if e.response is not None else ""
    body = e.body if hasattr(e, "body") else None
    logger.error(
        "LLM API error: %s %s | url=%s deployment=%s profile=%s | response_body=%s",
        e.status_code, type(e).__name__, url, deployment, profile, body,
    )


def create_completion(
    client: AzureOpenAI,
    config: ClientConfig,
    messages: list[dict[str, str]],
    response_format: dict[str, Any],
    profile: ParameterProfile,
) -> ChatCompletion:
    """Один вызов chat.completions с параметрами профиля. Ошибки API логируются и пробрасываются."""
    try:
        return client.chat.completions.create(
            model=config.deployment,
            messages=messages,
            response_format=response_format,
            **profile.params,
        )
    except APIStatusError as e:
        _log_api_error(e, deployment=config.deployment, profile=profile.name)
        raise
