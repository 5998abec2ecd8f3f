"""FastAPI-зависимости: настройки и клиент извлечения, по одному экземпляру на процесс."""
from functools import lru_cache

from call_insights.llm.client import ClientConfig
from call_insights.services.extraction import TranscriptAnalyzer
from call_insights.settings import Settings


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_analyzer() -> TranscriptAnalyzer:
    settings = get_settings()
    return TranscriptAnalyzer(
        ClientConfig.from_settings(settings),
        strict_validation=settings.analysis_strict_validation,
        token_meter=settings.enable_token_meter,
    )
