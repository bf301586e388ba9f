"""Diagnostic prompt assembly from form inputs and viewer lens."""

from pathlib import Path
from typing import Sequence

from pydantic import BaseModel, Field

from impactlens.schemas.inputs import (
    INPUT_SECTIONS,
    VIEWER_PROFILES,
    Attachment,
    DiagnosticInputs,
    ViewerType,
)
from impactlens.schemas.report import build_response_schema

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

EMPTY_SECTION_PLACEHOLDER = "No text data provided."
NO_ATTACHMENTS_PLACEHOLDER = "No documents attached."
PROMPT_VERSION = "v1.1"

LANGUAGE_NAMES = {"en": "English"}


def _load_template(name: str) -> str:
    """Load a prompt template shipped with the package."""
    return (PROMPTS_DIR / name).read_text(encoding="utf-8")


def build_system_instruction(language: str = "en") -> str:
    """Render the static system instruction for a target language."""
    viewer_lenses = "\n".join(
        f"- {viewer.value} → {VIEWER_PROFILES[viewer].focus}" for viewer in ViewerType
    )
    return _load_template("system_instruction.txt").format(
        language_name=LANGUAGE_NAMES.get(language, language),
        viewer_lenses=viewer_lenses,
    )


SYSTEM_INSTRUCTION = build_system_instruction()


class DiagnosticPrompt(BaseModel):
    """Everything sent to the model for one generation."""

    viewer: ViewerType
    system_instruction: str = Field(description="Static ruleset sent on the system channel")
    text: str = Field(description="Per-request prompt text")
    attachments: list[Attachment] = Field(default_factory=list)
    response_schema: dict = Field(description="Structural constraint on the output JSON")


class PromptAssembler:
    """Assembles the diagnostic request from inputs, viewer lens and attachments."""

    def __init__(self, language: str = "en", version: str = PROMPT_VERSION):
        """
        Initialize prompt assembler.

        Args:
            language: Target language code embedded in the prompt header
            version: Prompt version embedded in the prompt header
        """
        self.language = language
        self.version = version
        self.template = _load_template("diagnostic_request.txt")
        self.system_instruction = (
            SYSTEM_INSTRUCTION if language == "en" else build_system_instruction(language)
        )
        self.response_schema = build_response_schema(language)

    def assemble(
        self,
        inputs: DiagnosticInputs,
        viewer: ViewerType,
        attachments: Sequence[Attachment] = (),
    ) -> DiagnosticPrompt:
        """
        Assemble the full request payload.

        Args:
            inputs: The seven input sections
            viewer: Selected viewer lens
            attachments: Attached files, in display order

        Returns:
            DiagnosticPrompt carrying the system instruction, text, attachments and schema
        """
        viewer = ViewerType(viewer)
        return DiagnosticPrompt(
            viewer=viewer,
            system_instruction=self.system_instruction,
            text=self.assemble_text(inputs, viewer, attachments),
            attachments=list(attachments),
            response_schema=self.response_schema,
        )

    def assemble_text(
        self,
        inputs: DiagnosticInputs,
        viewer: ViewerType,
        attachments: Sequence[Attachment] = (),
    ) -> str:
        """
        Assemble the per-request prompt text.

        Every section is always rendered, with a placeholder when it is empty,
        so the model sees the same layout on every request.
        """
        return self.template.format(
            viewer=ViewerType(viewer).value,
            language=self.language,
            version=self.version,
            sections=self._build_sections(inputs),
            attachments=self._build_attachments(attachments),
        )

    def _build_sections(self, inputs: DiagnosticInputs) -> str:
        blocks = []
        for section in INPUT_SECTIONS:
            text = getattr(inputs, section.field)
            if not text.strip():
                text = EMPTY_SECTION_PLACEHOLDER
            blocks.append(
                f"SECTION {section.letter} — {section.title}\n({section.description})\n{text}"
            )
        return "\n\n".join(blocks)

    def _build_attachments(self, attachments: Sequence[Attachment]) -> str:
        if not attachments:
            return NO_ATTACHMENTS_PLACEHOLDER
        return "\n".join(
            f"{index}. {attachment.name} ({attachment.mime_type})"
            for index, attachment in enumerate(attachments, start=1)
        )
