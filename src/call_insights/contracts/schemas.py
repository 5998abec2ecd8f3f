"""
Контракт анализа звонка: JSON Schema для response_format и Pydantic-модель того же контракта.

Схема закрытая: все поля обязательны, additionalProperties=false на верхнем уровне и в keyInformation.
"""
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ANALYSIS_SCHEMA_NAME = "customer_service_analysis"

Sentiment = Literal["positive", "neutral", "negative", "frustrated"]
EscalationRisk = Literal["low", "medium", "high"]

KEY_INFORMATION_FIELDS = ("orderNumber", "customerEmail", "productSKU", "issueDate", "customerPhone")

ANALYSIS_JSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "sentiment": {
            "type": "string",
            "enum": ["positive", "neutral", "negative", "frustrated"],
            "description": "Overall customer sentiment",
        },
        "escalationRisk": {
            "type": "string",
            "enum": ["low", "medium", "high"],
            "description": "Risk of customer escalation",
        },
        "primaryIntent": {
            "type": "string",
            "description": "Main reason for customer contact",
        },
        "keyInformation": {
            "type": "object",
            "properties": {
                "orderNumber": {"type": "string", "description": "Extracted order number"},
                "customerEmail": {"type": "string", "description": "Customer email address"},
                "productSKU": {"type": "string", "description": "Product mentioned"},
                "issueDate": {"type": "string", "description": "When issue occurred"},
                "customerPhone": {"type": "string", "description": "Customer phone number"},
            },
            "required": list(KEY_INFORMATION_FIELDS),
            "additionalProperties": False,
        },
        "suggestedActions": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Recommended next steps",
        },
        "commitments": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Promises made to customer",
        },
        "confidenceScore": {
            "type": "number",
            "minimum": 0,
            "maximum": 1,
            "description": "Analysis confidence level",
        },
        "summary": {
            "type": "string",
            "description": "Brief case summary for CRM",
        },
    },
    "required": [
        "sentiment",
        "escalationRisk",
        "primaryIntent",
        "keyInformation",
        "suggestedActions",
        "commitments",
        "confidenceScore",
        "summary",
    ],
    "additionalProperties": False,
}


def response_format() -> dict[str, Any]:
    """Директива response_format для chat.completions: схема с strict=true."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": ANALYSIS_SCHEMA_NAME,
            "strict": True,
            "schema": ANALYSIS_JSON_SCHEMA,
        },
    }


class KeyInformation(BaseModel):
    """Ключевые факты из разговора. Ровно пять строковых полей."""
    model_config = ConfigDict(extra="forbid")

    orderNumber: str
    customerEmail: str
    productSKU: str
    issueDate: str
    customerPhone: str


class AnalysisContract(BaseModel):
    """Выход анализа звонка (тот же контракт, что ANALYSIS_JSON_SCHEMA)."""
    model_config = ConfigDict(extra="forbid")

    sentiment: Sentiment
    escalationRisk: EscalationRisk
    primaryIntent: str
    keyInformation: KeyInformation
    suggestedActions: list[str]
    commitments: list[str]
    confidenceScore: float = Field(ge=0.0, le=1.0)
    summary: str
