"""Unit tests for Pydantic schemas."""

import pytest
from pydantic import ValidationError

from impactlens.schemas.inputs import (
    DEFAULT_INPUTS,
    INPUT_SECTIONS,
    VIEWER_PROFILES,
    DiagnosticInputs,
    ViewerType,
    resolve_section,
)
from impactlens.schemas.report import RESPONSE_SCHEMA, AntiPortfolioData, ContextItem, EvidenceItem


class TestDiagnosticInputs:
    """Test DiagnosticInputs schema."""

    def test_accepts_camel_case_keys(self):
        inputs = DiagnosticInputs.model_validate(
            {"workTraces": "Shipped billing", "nonNegotiables": "No weekend deploys"}
        )
        assert inputs.work_traces == "Shipped billing"
        assert inputs.non_negotiables == "No weekend deploys"
        assert inputs.identity == ""

    def test_accepts_field_names(self):
        inputs = DiagnosticInputs(work_traces="Shipped billing")
        assert inputs.section_text("workTraces") == "Shipped billing"

    def test_rejects_unknown_sections(self):
        with pytest.raises(ValidationError):
            DiagnosticInputs.model_validate({"hobbies": "chess"})

    def test_normalizes_none_and_lists(self):
        inputs = DiagnosticInputs.model_validate({"friction": None, "failures": ["one", "two"]})
        assert inputs.friction == ""
        assert inputs.failures == "one\ntwo"

    def test_has_content_ignores_whitespace(self):
        assert not DiagnosticInputs.empty().has_content()
        assert not DiagnosticInputs(identity="   \n\t").has_content()
        assert DiagnosticInputs(background="CV").has_content()

    def test_file_dict_uses_form_order(self):
        keys = list(DEFAULT_INPUTS.to_file_dict())
        assert keys == [
            "identity",
            "workTraces",
            "friction",
            "failures",
            "preferences",
            "nonNegotiables",
            "background",
        ]

    def test_default_inputs(self):
        """Illustrative example text, with identity left for the user."""
        assert DEFAULT_INPUTS.identity == ""
        assert DEFAULT_INPUTS.has_content()
        assert "Deleted production database" in DEFAULT_INPUTS.failures


class TestSections:
    """Test the fixed section table."""

    def test_seven_sections_lettered_in_order(self):
        assert [s.letter for s in INPUT_SECTIONS] == list("ABCDEFG")
        assert len({s.field for s in INPUT_SECTIONS}) == 7

    def test_resolve_section(self):
        assert resolve_section("nonNegotiables") is resolve_section("non_negotiables")

    def test_resolve_unknown_section(self):
        with pytest.raises(KeyError):
            resolve_section("hobbies")

    def test_every_viewer_has_a_profile(self):
        assert set(VIEWER_PROFILES) == set(ViewerType)


class TestAntiPortfolioData:
    """Test AntiPortfolioData schema."""

    def test_valid_report(self, sample_report_data):
        report = AntiPortfolioData.model_validate(sample_report_data)
        assert report.meta.viewer is ViewerType.FOUNDER
        assert report.headline == "Ships fast, breaks trust"
        assert report.best_fit_contexts[0].why == "tolerates ambiguity"
        assert report.toxic_contexts[0].failure_pattern == "skips process"
        assert report.confidence.overall == "medium"

    def test_missing_required_field(self, sample_report_data):
        del sample_report_data["proof_hooks"]
        with pytest.raises(ValidationError):
            AntiPortfolioData.model_validate(sample_report_data)

    def test_unknown_viewer_rejected(self, sample_report_data):
        sample_report_data["meta"]["viewer"] = "investor"
        with pytest.raises(ValidationError):
            AntiPortfolioData.model_validate(sample_report_data)

    def test_tags_are_normalized(self):
        effect = EvidenceItem.model_validate(
            {"claim": "Ships", "evidence": "one snippet", "confidence": " HIGH "}
        )
        assert effect.confidence == "high"
        assert effect.evidence == ["one snippet"]

    def test_invalid_horizon(self, sample_report_data):
        sample_report_data["systemic_effects_timeline"][0]["horizon"] = "1_year"
        with pytest.raises(ValidationError):
            AntiPortfolioData.model_validate(sample_report_data)

    def test_context_rationale_optional(self):
        ctx = ContextItem(context="agencies", evidence=[])
        assert ctx.why is None
        assert ctx.failure_pattern is None


class TestResponseSchema:
    """Test the generation constraint sent to the model."""

    def test_required_keys_match_model(self):
        required_fields = {
            name for name, field in AntiPortfolioData.model_fields.items() if field.is_required()
        }
        assert set(RESPONSE_SCHEMA["required"]) == required_fields
        assert set(RESPONSE_SCHEMA["properties"]) == required_fields

    def test_viewer_enum(self):
        viewer = RESPONSE_SCHEMA["properties"]["meta"]["properties"]["viewer"]
        assert viewer["enum"] == [v.value for v in ViewerType]

    def test_horizon_enum(self):
        timeline = RESPONSE_SCHEMA["properties"]["systemic_effects_timeline"]
        assert timeline["items"]["properties"]["horizon"]["enum"] == ["2_weeks", "3_months", "6_months"]
