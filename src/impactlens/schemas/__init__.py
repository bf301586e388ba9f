"""Input and report schemas."""

from impactlens.schemas.inputs import (
    DEFAULT_INPUTS,
    INPUT_SECTIONS,
    VIEWER_PROFILES,
    Attachment,
    DiagnosticInputs,
    ViewerType,
)
from impactlens.schemas.report import RESPONSE_SCHEMA, AntiPortfolioData, build_response_schema

__all__ = [
    "AntiPortfolioData",
    "Attachment",
    "DiagnosticInputs",
    "ViewerType",
    "DEFAULT_INPUTS",
    "INPUT_SECTIONS",
    "VIEWER_PROFILES",
    "RESPONSE_SCHEMA",
    "build_response_schema",
]
