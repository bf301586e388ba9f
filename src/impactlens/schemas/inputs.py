"""Schemas for the diagnostic input form: sections, attachments and viewer lens."""

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ViewerType(str, Enum):
    """Stakeholder perspective used to interpret the same evidence."""

    FOUNDER = "founder"
    RECRUITER = "recruiter"
    TEAM_MEMBER = "team_member"
    CLIENT = "client"
    SELF = "self"


class ViewerProfile(NamedTuple):
    label: str
    description: str
    focus: str


VIEWER_PROFILES: dict[ViewerType, ViewerProfile] = {
    ViewerType.FOUNDER: ViewerProfile(
        "Founder", "Focus on ROI & Speed", "leverage, speed, decision quality, risk"
    ),
    ViewerType.RECRUITER: ViewerProfile(
        "Recruiter", "Focus on Red Flags", "signals, scope fit, red flags"
    ),
    ViewerType.TEAM_MEMBER: ViewerProfile(
        "Team", "Focus on Friction", "collaboration patterns, friction"
    ),
    ViewerType.CLIENT: ViewerProfile(
        "Client", "Focus on Risk", "communication clarity, delivery risk"
    ),
    ViewerType.SELF: ViewerProfile(
        "Self", "Deep Introspection", "blind spots, operating system"
    ),
}

DEFAULT_VIEWER = ViewerType.RECRUITER


class InputSection(NamedTuple):
    """One labeled section of the input form, in prompt order."""

    field: str
    key: str
    letter: str
    title: str
    description: str
    label: str
    hint: str


INPUT_SECTIONS: tuple[InputSection, ...] = (
    InputSection(
        "identity",
        "identity",
        "A",
        "IDENTITY",
        "Basic personal details & role context",
        "Identity",
        "Who you are and the role context.",
    ),
    InputSection(
        "work_traces",
        "workTraces",
        "B",
        "WORK TRACES",
        "Descriptions of projects, products, decisions, outcomes, artifacts, links",
        "Traces",
        "Decisions, outcomes, artifacts.",
    ),
    InputSection(
        "friction",
        "friction",
        "C",
        "FRICTION & CONFLICT",
        "Repeated tensions, conflicts with people or systems, things that “never worked”",
        "Friction",
        "Tensions and conflicts.",
    ),
    InputSection(
        "failures",
        "failures",
        "D",
        "FAILURES & REGRETS",
        "Explicit failures, things that went wrong, lessons that still hurt",
        "Failures",
        "Failures and lessons.",
    ),
    InputSection(
        "preferences",
        "preferences",
        "E",
        "STRONG PREFERENCES",
        "What this person consistently likes, hates, avoids, or insists on",
        "Prefs",
        "Likes and dislikes.",
    ),
    InputSection(
        "non_negotiables",
        "nonNegotiables",
        "F",
        "NON-NEGOTIABLES",
        "Rules, boundaries, principles they refuse to break",
        "Rules",
        "Hard boundaries.",
    ),
    InputSection(
        "background",
        "background",
        "G",
        "OPTIONAL BACKGROUND SIGNALS",
        "CV text, LinkedIn export, bios — treat as LOW-SIGNAL metadata only",
        "Context",
        "CV and Bio.",
    ),
)


def resolve_section(name: str) -> InputSection:
    """Find a section by attribute name or camelCase key."""
    for section in INPUT_SECTIONS:
        if name in (section.field, section.key):
            return section
    valid = ", ".join(section.key for section in INPUT_SECTIONS)
    raise KeyError(f"Unknown input section '{name}'. Valid sections: {valid}")


class DiagnosticInputs(BaseModel):
    """Free-text signals for each of the seven fixed sections.

    An empty string is valid and means "no signal for this section".
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    identity: str = Field(default="", description="Basic personal details & role context")
    work_traces: str = Field(
        default="", alias="workTraces", description="Projects, decisions, outcomes, artifacts"
    )
    friction: str = Field(default="", description="Repeated tensions and conflicts")
    failures: str = Field(default="", description="Explicit failures and regrets")
    preferences: str = Field(default="", description="Strong likes, dislikes and habits")
    non_negotiables: str = Field(
        default="", alias="nonNegotiables", description="Rules and boundaries"
    )
    background: str = Field(default="", description="CV, bios and other low-signal metadata")

    @field_validator("*", mode="before")
    @classmethod
    def normalize_text(cls, v) -> str:
        """Treat missing values as empty and join line lists into text."""
        if v is None:
            return ""
        if isinstance(v, list):
            return "\n".join(str(item) for item in v)
        return v

    def section_text(self, name: str) -> str:
        return getattr(self, resolve_section(name).field)

    def has_content(self) -> bool:
        """True when at least one section holds non-whitespace text."""
        return any(getattr(self, section.field).strip() for section in INPUT_SECTIONS)

    def to_file_dict(self) -> dict[str, str]:
        """Dump using the camelCase section keys, in form order."""
        return {section.key: getattr(self, section.field) for section in INPUT_SECTIONS}

    @classmethod
    def empty(cls) -> "DiagnosticInputs":
        return cls()


DEFAULT_INPUTS = DiagnosticInputs(
    identity="",
    work_traces=(
        "Projects:\n"
        "- Built a CLI tool for automating deployment because I hate clicking buttons.\n"
        "- Refactored legacy codebase reducing technical debt by 40%."
    ),
    friction=(
        "Conflicts:\n"
        "- I often clash with \"visionary\" types who don't care about implementation details."
    ),
    failures="Failures:\n- Deleted production database once. Added safeguards immediately.",
    preferences="Philosophy:\n- \"Done is better than perfect.\"",
    non_negotiables="Rules:\n- I will not work on weekends unless the building is on fire.",
    background="Experience:\n- 5 years as Full Stack Dev at Startup X",
)


class Attachment(BaseModel):
    """A file read fully into memory and carried as base64 text."""

    id: str = Field(description="Opaque identifier, unique within a session")
    name: str = Field(description="Display name (the original file name)")
    mime_type: str = Field(description="Declared MIME type")
    data: str = Field(description="Base64-encoded file content", repr=False)
