"""Session context owning the form state and the single result slot."""

from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from impactlens.core.attachments import read_attachment
from impactlens.core.diagnostic_client import DiagnosticClient
from impactlens.core.errors import DiagnosticError, GenerationInProgressError, InputValidationError
from impactlens.core.logging import get_logger
from impactlens.schemas.inputs import (
    DEFAULT_INPUTS,
    DEFAULT_VIEWER,
    Attachment,
    DiagnosticInputs,
    ViewerType,
    resolve_section,
)
from impactlens.schemas.report import AntiPortfolioData

logger = get_logger("impactlens.session")


class DiagnosticSession:
    """
    Owns one set of inputs, one ordered attachment list, the selected viewer
    and at most one report.

    The report slot is either empty or holds a fully validated report; it is
    replaced wholesale by each successful generation.
    """

    def __init__(
        self,
        client: DiagnosticClient,
        inputs: Optional[DiagnosticInputs] = None,
        viewer: ViewerType = DEFAULT_VIEWER,
    ):
        self.client = client
        self.inputs: DiagnosticInputs = (
            inputs.model_copy() if inputs is not None else DEFAULT_INPUTS.model_copy()
        )
        self.viewer: ViewerType = ViewerType(viewer)
        self.attachments: list[Attachment] = []
        self.result: Optional[AntiPortfolioData] = None
        self.error: Optional[str] = None
        self.loading: bool = False

    def update_section(self, name: str, text: str) -> None:
        """Replace the text of one section (snake_case or camelCase name)."""
        section = resolve_section(name)
        try:
            self.inputs = DiagnosticInputs.model_validate(
                {**self.inputs.model_dump(), section.field: text}
            )
        except ValidationError as e:
            raise InputValidationError(
                f"Invalid text for section '{section.key}': {e.errors()[0]['msg']}"
            ) from e

    def set_viewer(self, viewer: ViewerType) -> None:
        self.viewer = ViewerType(viewer)

    def add_attachment(self, attachment: Attachment) -> Attachment:
        self.attachments.append(attachment)
        return attachment

    def attach_file(self, path: Path) -> Attachment:
        """Read a file fully into memory and append it to the attachment list."""
        attachment = self.add_attachment(read_attachment(path))
        logger.debug(
            f"Attached {attachment.name}",
            attachment_id=attachment.id,
            mime_type=attachment.mime_type,
        )
        return attachment

    def remove_attachment(self, attachment_id: str) -> Attachment:
        """Remove one attachment by id, keeping the others in order."""
        for index, attachment in enumerate(self.attachments):
            if attachment.id == attachment_id:
                return self.attachments.pop(index)
        raise KeyError(f"No attachment with id '{attachment_id}'")

    def has_content(self) -> bool:
        return self.inputs.has_content() or bool(self.attachments)

    def clear_inputs(self) -> None:
        """Empty every section and drop all attachments."""
        self.inputs = DiagnosticInputs.empty()
        self.attachments = []

    def new_analysis(self) -> None:
        """Drop the current report so a new one can be generated."""
        self.result = None
        self.error = None

    def reset(self) -> None:
        self.clear_inputs()
        self.new_analysis()

    def generate(self) -> AntiPortfolioData:
        """
        Run one generation for the current inputs, viewer and attachments.

        Returns:
            The new report, also stored in ``result``

        Raises:
            GenerationInProgressError: If a generation is already running
            DiagnosticError: If generation fails; the message is kept in ``error``
        """
        if self.loading:
            raise GenerationInProgressError("A report is already being generated.")

        self.loading = True
        self.error = None
        self.result = None
        try:
            self.result = self.client.generate(self.inputs, self.viewer, list(self.attachments))
        except DiagnosticError as e:
            self.error = str(e)
            logger.error(
                "Diagnostic generation failed",
                error=self.error,
                error_type=type(e).__name__,
            )
            raise
        finally:
            self.loading = False
        return self.result
