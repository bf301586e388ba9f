"""Shared fixtures for ImpactLens tests."""

import base64
import json
from unittest.mock import MagicMock

import pytest

from impactlens.core.gemini_client import GeminiClient
from impactlens.schemas.inputs import Attachment, DiagnosticInputs
from impactlens.schemas.report import AntiPortfolioData

SAMPLE_REPORT_JSON = (
    '{"meta":{"viewer":"founder","language":"en","version":"v1"},'
    '"headline":"Ships fast, breaks trust",'
    '"diagnosis_summary":["Prioritizes velocity over consensus"],'
    '"systemic_effects_timeline":[{"horizon":"2_weeks","effects":[{"claim":"Team velocity rises",'
    '"evidence":["shipped 3 features week 1"],"confidence":"medium"}]}],'
    '"best_fit_contexts":[{"context":"early-stage startups","why":"tolerates ambiguity",'
    '"evidence":["launched MVP in 10 days"]}],'
    '"toxic_contexts":[{"context":"regulated enterprises","failure_pattern":"skips process",'
    '"evidence":["bypassed review twice"]}],'
    '"failure_modes":[{"mode":"scope creep ownership","trigger":"unclear requirements",'
    '"symptom":"silent rewrites","mitigation":"written specs upfront"},'
    '{"mode":"burnout spiral","trigger":"solo ownership","symptom":"missed standups",'
    '"mitigation":"forced delegation"}],'
    '"tradeoffs":[{"tradeoff":"speed vs review","upside":"faster releases","cost":"more hotfixes"}],'
    '"dont_work_with_me_if":["you need daily status meetings"],'
    '"viewer_lens_section":{"title":"Founder View","bullets":["high leverage",'
    '"low patience for process","fast but brittle"]},'
    '"proof_hooks":[{"claim_to_validate":"ships under pressure",'
    '"how_to_check":"ask for a 48h deadline story"}],'
    '"confidence":{"overall":"medium","notes":"limited evidence volume"}}'
)


@pytest.fixture
def sample_report_json():
    """Raw model output for a complete founder-lens report."""
    return SAMPLE_REPORT_JSON


@pytest.fixture
def sample_report_data():
    return json.loads(SAMPLE_REPORT_JSON)


@pytest.fixture
def sample_report():
    return AntiPortfolioData.model_validate_json(SAMPLE_REPORT_JSON)


@pytest.fixture
def long_report(sample_report_data):
    """Report with more items than the renderer displays."""
    data = dict(sample_report_data)
    data["systemic_effects_timeline"] = [
        {
            "horizon": horizon,
            "effects": [
                {
                    "claim": f"{horizon} claim {i}",
                    "evidence": [f"{horizon} evidence {i}a", f"{horizon} evidence {i}b"],
                    "confidence": "high",
                }
                for i in range(1, 4)
            ],
        }
        for horizon in ("2_weeks", "3_months", "6_months")
    ]
    data["failure_modes"] = [
        {"mode": f"mode {i}", "trigger": "t", "symptom": "s", "mitigation": "m"} for i in range(1, 5)
    ]
    data["dont_work_with_me_if"] = [f"flag {i}" for i in range(1, 6)]
    data["viewer_lens_section"] = {"title": "Founder View", "bullets": [f"bullet {i}" for i in range(1, 6)]}
    data["proof_hooks"] = [
        {"claim_to_validate": f"claim {i}", "how_to_check": f"check {i}"} for i in range(1, 5)
    ]
    return AntiPortfolioData.model_validate(data)


@pytest.fixture
def sample_inputs():
    return DiagnosticInputs(
        identity="Staff engineer, 12 years, mostly early-stage startups",
        work_traces="Rebuilt the billing pipeline in six weeks",
        friction="Clashes with managers who want weekly status decks",
        failures="",
        preferences="Written specs over meetings",
        non_negotiables="",
        background="",
    )


@pytest.fixture
def sample_attachment():
    return Attachment(
        id="att-1",
        name="cv.txt",
        mime_type="text/plain",
        data=base64.b64encode(b"Curriculum vitae").decode("ascii"),
    )


@pytest.fixture
def mock_llm_client(sample_report_json):
    """Model client that returns the sample report."""
    client = MagicMock(spec=GeminiClient)
    client.model = "gemini-2.5-flash"
    client.generate.return_value = sample_report_json
    return client
