"""
Извлечение анализа звонка: транскрипт -> chat.completions со строгой JSON Schema -> AnalysisContract.

Первый вызов идёт с legacy-профилем. Если модель отвечает 400 про max_tokens/temperature,
делается ровно один повтор с alternate-профилем; других повторов нет.
"""
import json
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx
from openai import APIStatusError, AzureOpenAI
from openai.types.chat import ChatCompletion
from pydantic import ValidationError

from call_insights.contracts.schemas import AnalysisContract, KeyInformation, response_format
from call_insights.errors import (
    AuthenticationFailedError,
    DeploymentNotFoundError,
    ExtractionError,
    InvalidJsonError,
    MalformedResponseError,
    NotConfiguredError,
    SchemaViolationError,
    TruncatedError,
)
from call_insights.llm.client import (
    ALTERNATE_PROFILE,
    LEGACY_PROFILE,
    ClientConfig,
    ParameterProfile,
    create_completion,
    is_parameter_mismatch,
    make_client,
)
from call_insights.llm.token_meter import get_usage_from_response
from call_insights.llm.tokenizer import count_tokens
from call_insights.prompts.render import render_analysis_messages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestAttempt:
    """Один вызов completion: профиль, сырой ответ, результат или ошибка."""

    profile: str
    completion: ChatCompletion | None = None
    analysis: AnalysisContract | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.analysis is not None


@dataclass(frozen=True)
class ExtractionOutcome:
    analysis: AnalysisContract
    attempts: tuple[RequestAttempt, ...]

    @property
    def profile(self) -> str:
        return self.attempts[-1].profile


class TranscriptAnalyzer:
    """
    Клиент извлечения. Принимает готовую ClientConfig; SDK-клиент создаётся лениво
    при первом вызове с валидной конфигурацией и дальше переиспользуется.
    http_client позволяет подменить транспорт (в тестах httpx.MockTransport).
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_client: httpx.Client | None = None,
        strict_validation: bool = True,
        token_meter: bool = False,
    ):
        self.config = config
        self.strict_validation = strict_validation
        self.token_meter = token_meter
        self._http_client = http_client
        self._client: AzureOpenAI | None = None

    def _get_client(self) -> AzureOpenAI:
        if self._client is None:
            self._client = make_client(self.config, self._http_client)
            logger.info(
                "[EXTRACT] client ready endpoint=%s deployment=%s api_version=%s",
                self.config.endpoint, self.config.deployment, self.config.api_version,
            )
        return self._client

    def analyze(self, transcript: str) -> AnalysisContract:
        return self.run(transcript).analysis

    def run(self, transcript: str) -> ExtractionOutcome:
        """
        Полный цикл извлечения. Возвращает ExtractionOutcome или бросает ExtractionError;
        прочие ошибки openai (5xx, 429, сеть, таймаут) пробрасываются без изменений.
        """
        if not self.config.is_ready:
            logger.warning("[EXTRACT] not configured missing=%s", self.config.missing)
            raise NotConfiguredError(self.config.missing)

        messages = render_analysis_messages(transcript)
        if self.token_meter:
            logger.info("[EXTRACT] prompt_tokens_estimate=%d", count_tokens(messages))

        attempts: list[RequestAttempt] = []
        try:
            profile, completion = self._dispatch(messages, attempts)
        except APIStatusError as e:
            classified = self._classify(e)
            if classified is None:
                raise
            raise classified from e

        try:
            analysis = self._decode(completion, profile)
        except ExtractionError as e:
            attempts.append(RequestAttempt(profile.name, completion=completion, error=e))
            logger.warning(
                "[EXTRACT] failed profile=%s attempts=%d error=%s",
                profile.name, len(attempts), type(e).__name__,
            )
            raise

        attempts.append(RequestAttempt(profile.name, completion=completion, analysis=analysis))
        logger.info(
            "[EXTRACT] ok profile=%s attempts=%d sentiment=%s escalation=%s",
            profile.name, len(attempts), analysis.sentiment, analysis.escalationRisk,
        )
        return ExtractionOutcome(analysis=analysis, attempts=tuple(attempts))

    def _dispatch(
        self,
        messages: list[dict[str, str]],
        attempts: list[RequestAttempt],
    ) -> tuple[ParameterProfile, ChatCompletion]:
        """legacy -> (при несовместимости параметров) alternate -> конец."""
        client = self._get_client()
        fmt = response_format()
        try:
            return LEGACY_PROFILE, self._call(client, messages, fmt, LEGACY_PROFILE)
        except APIStatusError as e:
            attempts.append(RequestAttempt(LEGACY_PROFILE.name, error=e))
            if not is_parameter_mismatch(e):
                raise
            logger.warning("[EXTRACT] legacy parameters rejected, retrying with %s profile", ALTERNATE_PROFILE.name)
        return ALTERNATE_PROFILE, self._call(client, messages, fmt, ALTERNATE_PROFILE)

    def _call(
        self,
        client: AzureOpenAI,
        messages: list[dict[str, str]],
        fmt: dict[str, Any],
        profile: ParameterProfile,
    ) -> ChatCompletion:
        start = time.perf_counter()
        completion = create_completion(client, self.config, messages, fmt, profile)
        elapsed = time.perf_counter() - start
        finish_reason = completion.choices[0].finish_reason if completion.choices else None
        logger.info(
            "[EXTRACT] completion profile=%s finish_reason=%s elapsed_sec=%.2f",
            profile.name, finish_reason, elapsed,
        )
        if self.token_meter:
            logger.info("[EXTRACT] usage profile=%s %s", profile.name, get_usage_from_response(completion))
        return completion

    def _classify(self, e: APIStatusError) -> ExtractionError | None:
        if e.status_code == 404:
            return DeploymentNotFoundError(self.config.deployment)
        if e.status_code == 401:
            return AuthenticationFailedError()
        return None

    def _decode(self, completion: ChatCompletion, profile: ParameterProfile) -> AnalysisContract:
        choice = completion.choices[0] if completion.choices else None
        if choice is None:
            raise MalformedResponseError("no choices in completion")
        # Обрезанный JSON не разбираем, даже если он синтаксически валиден
        if choice.finish_reason == "length":
            raise TruncatedError(profile.name)
        message = choice.message
        content = message.content if message is not None else None
        if not content:
            refusal = getattr(message, "refusal", None)
            if refusal:
                raise MalformedResponseError(f"model refused: {refusal}")
            raise MalformedResponseError("missing content")
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("[EXTRACT] JSON decode error: %s", e)
            raise InvalidJsonError(e) from e
        return self._validate(data)

    def _validate(self, data: Any) -> AnalysisContract:
        if not self.strict_validation:
            if not isinstance(data, dict):
                raise SchemaViolationError(f"expected a JSON object, got {type(data).__name__}")
            key_info = data.get("keyInformation")
            if isinstance(key_info, dict):
                data = {**data, "keyInformation": KeyInformation.model_construct(**key_info)}
            return AnalysisContract.model_construct(**data)
        try:
            # strict: без приведения типов ("0.9" и true для confidenceScore не проходят)
            return AnalysisContract.model_validate(data, strict=True)
        except ValidationError as e:
            logger.error("[EXTRACT] schema validation error: %s", e)
            raise SchemaViolationError(str(e)) from e
