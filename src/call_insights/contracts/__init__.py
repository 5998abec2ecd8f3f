"""Контракты (schemas): выход анализа звонка и mock CRM."""
from call_insights.contracts.crm_schemas import CrmRecord, FollowUpEmail, Scenario
from call_insights.contracts.schemas import (
    ANALYSIS_JSON_SCHEMA,
    ANALYSIS_SCHEMA_NAME,
    AnalysisContract,
    KeyInformation,
)

__all__ = [
    "ANALYSIS_JSON_SCHEMA",
    "ANALYSIS_SCHEMA_NAME",
    "AnalysisContract",
    "CrmRecord",
    "FollowUpEmail",
    "KeyInformation",
    "Scenario",
]
