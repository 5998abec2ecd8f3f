"""
Рендеринг jinja2-шаблонов: сообщения для LLM и текст follow-up письма.

Транскрипт вставляется в user-сообщение как есть, без экранирования и обрезки.
"""
import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from call_insights.prompts.system_prompts import ANALYSIS_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
ANALYSIS_TEMPLATE = "analyze_transcript.j2"
FOLLOW_UP_TEMPLATE = "follow_up_email.j2"

FOCUS_POINTS = (
    "Customer sentiment and escalation risk",
    "Key information that should be recorded",
    "Specific commitments made to the customer",
    "Recommended next actions",
)

_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(default=False),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_analysis_messages(transcript: str) -> list[dict[str, str]]:
    """Собрать сообщения для LLM: [system, user]."""
    template = _env.get_template(ANALYSIS_TEMPLATE)
    user_message = template.render(transcript=transcript, focus=FOCUS_POINTS).strip()
    logger.debug("render analysis prompt chars=%d", len(user_message))
    return [
        {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": user_message},
    ]


def render_follow_up_body(
    record: Any,
    *,
    greeting: str,
    next_steps: list[str],
    resolution_date: str,
) -> str:
    template = _env.get_template(FOLLOW_UP_TEMPLATE)
    return template.render(
        record=record,
        greeting=greeting,
        next_steps=next_steps,
        resolution_date=resolution_date,
    ).strip()
