"""Schema for the diagnostic anti-portfolio returned by the model."""

import copy
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from impactlens.schemas.inputs import ViewerType

ConfidenceLevel = Literal["high", "medium", "low"]
Horizon = Literal["2_weeks", "3_months", "6_months"]

HORIZONS: tuple[str, ...] = ("2_weeks", "3_months", "6_months")
CONFIDENCE_LEVELS: tuple[str, ...] = ("high", "medium", "low")


def _normalize_string_list(v) -> list[str]:
    """Accept a bare string where a list of strings is expected."""
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    return v


def _normalize_tag(v):
    if isinstance(v, str):
        return v.strip().lower()
    return v


class ReportMeta(BaseModel):
    """Generation metadata echoed back by the model."""

    viewer: ViewerType
    language: str
    version: str

    @field_validator("viewer", mode="before")
    @classmethod
    def normalize_viewer(cls, v):
        return _normalize_tag(v)


class EvidenceItem(BaseModel):
    """A claim with its supporting evidence snippets."""

    claim: str
    evidence: list[str] = Field(description="1-3 short snippets from the input")
    confidence: ConfidenceLevel

    @field_validator("evidence", mode="before")
    @classmethod
    def normalize_evidence(cls, v) -> list[str]:
        return _normalize_string_list(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def normalize_confidence(cls, v):
        return _normalize_tag(v)


class TimelineEvent(BaseModel):
    """Systemic effects expected within one time horizon."""

    horizon: Horizon
    effects: list[EvidenceItem]

    @field_validator("horizon", mode="before")
    @classmethod
    def normalize_horizon(cls, v):
        return _normalize_tag(v)


class ContextItem(BaseModel):
    """A working context, with either a fit rationale or a failure pattern."""

    context: str
    why: Optional[str] = Field(default=None, description="Why this context fits")
    failure_pattern: Optional[str] = Field(
        default=None, description="How things break down in this context"
    )
    evidence: list[str]

    @field_validator("evidence", mode="before")
    @classmethod
    def normalize_evidence(cls, v) -> list[str]:
        return _normalize_string_list(v)


class FailureMode(BaseModel):
    mode: str
    trigger: str
    symptom: str
    mitigation: str


class Tradeoff(BaseModel):
    tradeoff: str
    upside: str
    cost: str


class ViewerLens(BaseModel):
    """Section written specifically for the selected viewer."""

    title: str
    bullets: list[str]

    @field_validator("bullets", mode="before")
    @classmethod
    def normalize_bullets(cls, v) -> list[str]:
        return _normalize_string_list(v)


class ProofHook(BaseModel):
    """A way for the reader to test a claim against reality."""

    claim_to_validate: str
    how_to_check: str


class Confidence(BaseModel):
    overall: ConfidenceLevel
    notes: str

    @field_validator("overall", mode="before")
    @classmethod
    def normalize_overall(cls, v):
        return _normalize_tag(v)


class AntiPortfolioData(BaseModel):
    """Complete diagnostic anti-portfolio.

    List length caps (two failure modes, three lens bullets, ...) are requested
    from the model but not enforced here; the renderer truncates for display.
    """

    meta: ReportMeta
    headline: str
    diagnosis_summary: list[str]
    systemic_effects_timeline: list[TimelineEvent]
    best_fit_contexts: list[ContextItem]
    toxic_contexts: list[ContextItem]
    failure_modes: list[FailureMode]
    tradeoffs: list[Tradeoff]
    dont_work_with_me_if: list[str]
    viewer_lens_section: ViewerLens
    proof_hooks: list[ProofHook]
    confidence: Confidence

    @field_validator("diagnosis_summary", "dont_work_with_me_if", mode="before")
    @classmethod
    def normalize_string_lists(cls, v) -> list[str]:
        return _normalize_string_list(v)


def _string() -> dict:
    return {"type": "STRING"}


def _string_list() -> dict:
    return {"type": "ARRAY", "items": _string()}


def _object(properties: dict, required: list[str]) -> dict:
    return {"type": "OBJECT", "properties": properties, "required": required}


# Structural constraint for English output; see build_response_schema.
RESPONSE_SCHEMA: dict = _object(
    {
        "meta": _object(
            {
                "viewer": {"type": "STRING", "enum": [v.value for v in ViewerType]},
                "language": {"type": "STRING", "enum": ["en"]},
                "version": _string(),
            },
            ["viewer", "language", "version"],
        ),
        "headline": _string(),
        "diagnosis_summary": _string_list(),
        "systemic_effects_timeline": {
            "type": "ARRAY",
            "items": _object(
                {
                    "horizon": {"type": "STRING", "enum": list(HORIZONS)},
                    "effects": {
                        "type": "ARRAY",
                        "items": _object(
                            {
                                "claim": _string(),
                                "evidence": _string_list(),
                                "confidence": {"type": "STRING", "enum": list(CONFIDENCE_LEVELS)},
                            },
                            ["claim", "evidence", "confidence"],
                        ),
                    },
                },
                ["horizon", "effects"],
            ),
        },
        "best_fit_contexts": {
            "type": "ARRAY",
            "items": _object(
                {"context": _string(), "why": _string(), "evidence": _string_list()},
                ["context", "why", "evidence"],
            ),
        },
        "toxic_contexts": {
            "type": "ARRAY",
            "items": _object(
                {"context": _string(), "failure_pattern": _string(), "evidence": _string_list()},
                ["context", "failure_pattern", "evidence"],
            ),
        },
        "failure_modes": {
            "type": "ARRAY",
            "items": _object(
                {
                    "mode": _string(),
                    "trigger": _string(),
                    "symptom": _string(),
                    "mitigation": _string(),
                },
                ["mode", "trigger", "symptom", "mitigation"],
            ),
        },
        "tradeoffs": {
            "type": "ARRAY",
            "items": _object(
                {"tradeoff": _string(), "upside": _string(), "cost": _string()},
                ["tradeoff", "upside", "cost"],
            ),
        },
        "dont_work_with_me_if": _string_list(),
        "viewer_lens_section": _object(
            {"title": _string(), "bullets": _string_list()},
            ["title", "bullets"],
        ),
        "proof_hooks": {
            "type": "ARRAY",
            "items": _object(
                {"claim_to_validate": _string(), "how_to_check": _string()},
                ["claim_to_validate", "how_to_check"],
            ),
        },
        "confidence": _object(
            {
                "overall": {"type": "STRING", "enum": list(CONFIDENCE_LEVELS)},
                "notes": _string(),
            },
            ["overall", "notes"],
        ),
    },
    [
        "meta",
        "headline",
        "diagnosis_summary",
        "systemic_effects_timeline",
        "best_fit_contexts",
        "toxic_contexts",
        "failure_modes",
        "tradeoffs",
        "dont_work_with_me_if",
        "viewer_lens_section",
        "proof_hooks",
        "confidence",
    ],
)


def build_response_schema(language: str = "en") -> dict:
    """Response schema with ``meta.language`` pinned to the requested output language."""
    schema = copy.deepcopy(RESPONSE_SCHEMA)
    schema["properties"]["meta"]["properties"]["language"]["enum"] = [language]
    return schema
