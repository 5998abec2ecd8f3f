"""Системные промпты для сервисов."""

from call_insights.prompts.system_prompts.analysis import ANALYSIS_SYSTEM_PROMPT

__all__ = ("ANALYSIS_SYSTEM_PROMPT",)
