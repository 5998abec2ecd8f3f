"""Pydantic-модели mock CRM: сценарий звонка, запись кейса, follow-up письмо."""
from pydantic import BaseModel, Field

from call_insights.contracts.schemas import KeyInformation, Sentiment


class Scenario(BaseModel):
    """Демо-сценарий: готовый транскрипт разговора."""

    id: str = Field(..., min_length=1)
    title: str
    description: str = ""
    transcription: str = Field(..., min_length=1)


class CrmRecord(BaseModel):
    """Кейс в mock CRM, собранный из утверждённого анализа."""

    caseId: str
    title: str
    priority: str
    status: str = "Active"
    assignedTo: str = "Customer Service Team"
    category: str
    description: str
    sentiment: Sentiment
    customerInfo: KeyInformation
    nextActions: list[str]
    commitments: list[str]
    createdAt: str
    estimatedResolution: str
    confidenceScore: float
    scenarioId: str | None = None


class FollowUpEmail(BaseModel):
    subject: str
    greeting: str
    body: str
