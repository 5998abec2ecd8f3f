"""
Mock CRM: кейс из утверждённого анализа и follow-up письмо клиенту.
Реальной интеграции нет, запись только собирается и возвращается.
"""
import logging
import re
from datetime import datetime, timedelta, timezone

from call_insights.contracts.crm_schemas import CrmRecord, FollowUpEmail
from call_insights.contracts.schemas import AnalysisContract
from call_insights.prompts.render import render_follow_up_body

logger = logging.getLogger(__name__)

PRIORITY_BY_RISK = {"high": "High", "medium": "Medium", "low": "Low"}
RESOLUTION_HOURS_BY_RISK = {"high": 4, "medium": 24, "low": 72}

# Фразы агента, в которых звучит имя клиента
NAME_PATTERNS = [
    re.compile(r"Absolutely,?\s+([A-Z][a-z]+)\."),
    re.compile(r"I see your (?:account|reservation) here.*?([A-Z][a-z]+)"),
    re.compile(r"thank you,?\s+([A-Z][a-z]+)\."),
    re.compile(r"Great,?\s+thank you\s+([A-Z][a-z]+)\."),
    re.compile(r"No worries,?\s+([A-Z][a-z]+)\."),
]
NOT_NAMES = frozenset({"for", "the", "and", "you", "can", "will", "are", "have"})

DEFAULT_GREETING = "Dear Valued Customer,"


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def estimated_resolution(risk: str, created_at: datetime) -> datetime:
    hours = RESOLUTION_HOURS_BY_RISK.get(risk, RESOLUTION_HOURS_BY_RISK["low"])
    return created_at + timedelta(hours=hours)


def create_crm_record(
    analysis: AnalysisContract,
    scenario_id: str | None = None,
    now: datetime | None = None,
) -> CrmRecord:
    """Собрать кейс mock CRM: приоритет и срок решения зависят от escalationRisk."""
    created_at = now or datetime.now(timezone.utc)
    record = CrmRecord(
        caseId=f"CASE-{int(created_at.timestamp() * 1000)}",
        title=f"Customer Service Case - {analysis.primaryIntent}",
        priority=PRIORITY_BY_RISK.get(analysis.escalationRisk, "Low"),
        category=analysis.primaryIntent,
        description=analysis.summary,
        sentiment=analysis.sentiment,
        customerInfo=analysis.keyInformation,
        nextActions=list(analysis.suggestedActions),
        commitments=list(analysis.commitments),
        createdAt=_iso(created_at),
        estimatedResolution=_iso(estimated_resolution(analysis.escalationRisk, created_at)),
        confidenceScore=analysis.confidenceScore,
        scenarioId=scenario_id,
    )
    logger.info("[CRM] record case_id=%s priority=%s scenario=%s", record.caseId, record.priority, scenario_id)
    return record


def extract_customer_name(transcript: str) -> str | None:
    for pattern in NAME_PATTERNS:
        match = pattern.search(transcript or "")
        if match and len(match.group(1)) > 2 and match.group(1).lower() not in NOT_NAMES:
            return match.group(1)
    return None


def format_action(action: str) -> str:
    """snake_case -> Title Case."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), action.replace("_", " "))


def compose_follow_up_email(record: CrmRecord, customer_name: str | None = None) -> FollowUpEmail:
    greeting = f"Dear {customer_name}," if customer_name else DEFAULT_GREETING
    resolution = datetime.fromisoformat(record.estimatedResolution.replace("Z", "+00:00"))
    body = render_follow_up_body(
        record,
        greeting=greeting,
        next_steps=[format_action(a) for a in record.nextActions],
        resolution_date=resolution.strftime("%Y-%m-%d"),
    )
    return FollowUpEmail(
        subject=f"Follow-up: Your Support Case {record.caseId}",
        greeting=greeting,
        body=body,
    )
