"""Учёт токенов по ответу API (usage). Включается через ENABLE_TOKEN_METER."""
from typing import Any


def get_usage_from_response(response: Any) -> dict[str, int]:
    """
    Из ChatCompletion извлечь usage.
    Возвращает {"prompt_tokens", "completion_tokens", "total_tokens"} или пустой dict.
    """
    usage = getattr(response, "usage", None) if response is not None else None
    if not usage:
        return {}
    prompt = getattr(usage, "prompt_tokens", 0) or 0
    completion = getattr(usage, "completion_tokens", 0) or 0
    return {
        "prompt_tokens": prompt,
        "completion_tokens": completion,
        "total_tokens": getattr(usage, "total_tokens", 0) or prompt + completion,
    }
