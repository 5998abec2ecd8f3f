"""Классифицированные ошибки извлечения анализа. Транспортные ошибки openai пробрасываются как есть."""
import json


class ExtractionError(Exception):
    """Базовая ошибка извлечения: стабильный kind и подсказка HTTP-статуса для API-слоя."""

    kind = "extraction_error"
    http_status = 502


class NotConfiguredError(ExtractionError):
    """Не заданы endpoint, ключ или deployment. Сетевой вызов не выполнялся."""

    kind = "not_configured"
    http_status = 503

    def __init__(self, missing: list[str] | None = None):
        self.missing = missing or []
        msg = (
            "Azure OpenAI client not configured. Please set AZURE_OPENAI_ENDPOINT, "
            "AZURE_OPENAI_KEY and AZURE_OPENAI_DEPLOYMENT."
        )
        if self.missing:
            msg += f" Missing: {', '.join(self.missing)}"
        super().__init__(msg)


class DeploymentNotFoundError(ExtractionError):
    kind = "deployment_not_found"

    def __init__(self, deployment: str):
        self.deployment = deployment
        super().__init__(f"Deployment '{deployment}' not found. Check your deployment name.")


class AuthenticationFailedError(ExtractionError):
    kind = "authentication_failed"

    def __init__(self):
        super().__init__("Authentication failed. Check your API key.")


class TruncatedError(ExtractionError):
    """finish_reason=length: ответ обрезан, JSON не разбирается."""

    kind = "truncated"
    http_status = 422

    def __init__(self, profile: str):
        self.profile = profile
        super().__init__("Response was truncated due to token limit. The analysis may be incomplete.")


class MalformedResponseError(ExtractionError):
    kind = "malformed_response"

    def __init__(self, detail: str = "missing content"):
        super().__init__(f"Unexpected OpenAI response format: {detail}")


class InvalidJsonError(ExtractionError):
    """Контент есть, но не JSON. Исходная ошибка в decode_error."""

    kind = "invalid_json"

    def __init__(self, decode_error: json.JSONDecodeError):
        self.decode_error = decode_error
        super().__init__(f"Failed to parse AI response. Response was not valid JSON: {decode_error}")


class SchemaViolationError(ExtractionError):
    """JSON разобран, но не проходит AnalysisContract."""

    kind = "schema_violation"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"AI response does not match the analysis schema: {detail}")
