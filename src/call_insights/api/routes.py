"""Эндпоинты API: /analyze, /finalize, /scenarios, /schema."""
import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import AliasChoices, BaseModel, Field

from call_insights.contracts.crm_schemas import Scenario
from call_insights.contracts.schemas import ANALYSIS_JSON_SCHEMA, AnalysisContract
from call_insights.dependencies import get_analyzer, get_settings
from call_insights.services.crm import compose_follow_up_email, create_crm_record, extract_customer_name
from call_insights.services.extraction import TranscriptAnalyzer
from call_insights.services.scenarios import get_scenario, load_scenarios, scenarios_file
from call_insights.settings import Settings

router = APIRouter()
logger = logging.getLogger(__name__)


class AnalyzeRequestBody(BaseModel):
    transcription: str = Field(..., min_length=1, validation_alias=AliasChoices("transcription", "transcript"))
    scenarioId: str | None = None


class FinalizeRequestBody(BaseModel):
    analysis: AnalysisContract
    scenarioId: str | None = None
    transcription: str | None = None


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.post("/analyze")
def analyze(
    body: AnalyzeRequestBody,
    analyzer: TranscriptAnalyzer = Depends(get_analyzer),
    settings: Settings = Depends(get_settings),
):
    """Транскрипт -> AnalysisContract. Ошибки извлечения обрабатываются exception handlers в main."""
    if len(body.transcription) > settings.max_transcript_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Transcript is longer than {settings.max_transcript_chars} characters",
        )
    logger.info("[API] POST /analyze scenario=%s chars=%d", body.scenarioId, len(body.transcription))
    outcome = analyzer.run(body.transcription)
    return {
        "success": True,
        "analysis": outcome.analysis.model_dump(),
        "schema": ANALYSIS_JSON_SCHEMA,
        "parameterProfile": outcome.profile,
        "timestamp": _timestamp(),
    }


@router.post("/finalize")
async def finalize(body: FinalizeRequestBody, settings: Settings = Depends(get_settings)):
    """Отредактированный человеком анализ -> запись mock CRM и follow-up письмо."""
    logger.info("[API] POST /finalize scenario=%s", body.scenarioId)
    if settings.crm_simulated_delay > 0:
        await asyncio.sleep(settings.crm_simulated_delay)

    record = create_crm_record(body.analysis, body.scenarioId)
    transcript = body.transcription
    if transcript is None and body.scenarioId:
        try:
            scenario = get_scenario(body.scenarioId, scenarios_file(settings.scenarios_path))
        except (OSError, ValueError) as e:
            logger.warning("[API] /finalize scenarios unavailable path=%s: %s", settings.scenarios_path, e)
            scenario = None
        transcript = scenario.transcription if scenario else None
    email = compose_follow_up_email(record, extract_customer_name(transcript or ""))
    return {
        "success": True,
        "crmRecord": record.model_dump(),
        "followUpEmail": email.model_dump(),
        "message": "Analysis finalized and sent to CRM",
        "timestamp": _timestamp(),
    }


@router.get("/scenarios", response_model=list[Scenario])
def list_scenarios(settings: Settings = Depends(get_settings)):
    return list(load_scenarios(scenarios_file(settings.scenarios_path)))


@router.get("/scenarios/{scenario_id}", response_model=Scenario)
def read_scenario(scenario_id: str, settings: Settings = Depends(get_settings)):
    scenario = get_scenario(scenario_id, scenarios_file(settings.scenarios_path))
    if scenario is None:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return scenario


@router.get("/schema")
def read_schema():
    """JSON Schema анализа: тот же объект, что уходит в response_format."""
    return ANALYSIS_JSON_SCHEMA
