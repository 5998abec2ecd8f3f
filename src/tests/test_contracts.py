"""Контракт анализа: Pydantic-модель и JSON Schema описывают одну и ту же закрытую структуру."""
import pytest
from pydantic import ValidationError

from call_insights.contracts.schemas import (
    ANALYSIS_JSON_SCHEMA,
    KEY_INFORMATION_FIELDS,
    AnalysisContract,
    KeyInformation,
    response_format,
)


class TestAnalysisJsonSchema:
    def test_every_property_is_required(self):
        assert set(ANALYSIS_JSON_SCHEMA["required"]) == set(ANALYSIS_JSON_SCHEMA["properties"])
        key_info = ANALYSIS_JSON_SCHEMA["properties"]["keyInformation"]
        assert set(key_info["required"]) == set(key_info["properties"]) == set(KEY_INFORMATION_FIELDS)

    def test_schema_is_closed(self):
        assert ANALYSIS_JSON_SCHEMA["additionalProperties"] is False
        assert ANALYSIS_JSON_SCHEMA["properties"]["keyInformation"]["additionalProperties"] is False

    def test_model_matches_schema_fields(self):
        assert set(AnalysisContract.model_fields) == set(ANALYSIS_JSON_SCHEMA["properties"])
        assert set(KeyInformation.model_fields) == set(KEY_INFORMATION_FIELDS)

    def test_response_format_is_strict(self):
        fmt = response_format()
        assert fmt["type"] == "json_schema"
        assert fmt["json_schema"]["strict"] is True
        assert fmt["json_schema"]["schema"] is ANALYSIS_JSON_SCHEMA


class TestAnalysisContract:
    def test_valid_passes(self, valid_analysis):
        out = AnalysisContract.model_validate(valid_analysis)
        assert out.sentiment == "negative"
        assert out.keyInformation.orderNumber == "12345"
        assert out.model_dump() == valid_analysis

    def test_empty_lists_allowed(self, valid_analysis):
        valid_analysis["suggestedActions"] = []
        valid_analysis["commitments"] = []
        assert AnalysisContract.model_validate(valid_analysis).commitments == []

    def test_extra_field_forbidden(self, valid_analysis):
        valid_analysis["extra"] = "no"
        with pytest.raises(ValidationError) as exc:
            AnalysisContract.model_validate(valid_analysis)
        assert "extra" in str(exc.value).lower() or "forbid" in str(exc.value).lower()

    def test_key_information_extra_forbidden(self, valid_analysis):
        valid_analysis["keyInformation"]["customerName"] = "Sarah"
        with pytest.raises(ValidationError):
            AnalysisContract.model_validate(valid_analysis)

    @pytest.mark.parametrize("field", list(ANALYSIS_JSON_SCHEMA["required"]))
    def test_missing_field_fails(self, valid_analysis, field):
        del valid_analysis[field]
        with pytest.raises(ValidationError):
            AnalysisContract.model_validate(valid_analysis)

    def test_invalid_sentiment_fails(self, valid_analysis):
        valid_analysis["sentiment"] = "angry"
        with pytest.raises(ValidationError):
            AnalysisContract.model_validate(valid_analysis)

    def test_invalid_escalation_risk_fails(self, valid_analysis):
        valid_analysis["escalationRisk"] = "critical"
        with pytest.raises(ValidationError):
            AnalysisContract.model_validate(valid_analysis)

    def test_confidence_out_of_range_fails(self, valid_analysis):
        for value in (1.5, -0.1):
            valid_analysis["confidenceScore"] = value
            with pytest.raises(ValidationError):
                AnalysisContract.model_validate(valid_analysis)

    def test_confidence_bounds_inclusive(self, valid_analysis):
        for value in (0, 1):
            valid_analysis["confidenceScore"] = value
            assert AnalysisContract.model_validate(valid_analysis).confidenceScore == value
