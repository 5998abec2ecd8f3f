"""Конфигурация приложения из переменных окружения (и .env в корне проекта)."""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Корень проекта: src/call_insights/settings.py -> .. -> .. -> ..
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

DEFAULT_API_VERSION = "2024-08-01-preview"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    azure_openai_endpoint: str = ""
    azure_openai_key: str = ""
    azure_openai_deployment: str = ""
    azure_openai_api_version: str = DEFAULT_API_VERSION
    llm_timeout: float = 60.0
    enable_token_meter: bool = False
    analysis_strict_validation: bool = True
    max_transcript_chars: int = 100_000
    scenarios_path: str = ""
    crm_simulated_delay: float = 1.5
