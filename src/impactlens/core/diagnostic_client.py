"""One-shot diagnostic generation: assemble, call the model once, parse and validate."""

import json
import re
import time
from typing import Optional, Sequence

from impactlens.assembler.prompt_assembler import PromptAssembler
from impactlens.core.errors import DiagnosticError, InputValidationError, MalformedResponseError
from impactlens.core.llm_base import LLMClientBase
from impactlens.core.logging import get_logger
from impactlens.core.validator import validate_report
from impactlens.schemas.inputs import Attachment, DiagnosticInputs, ViewerType
from impactlens.schemas.report import AntiPortfolioData

EMPTY_INPUT_MESSAGE = "Please provide input text or upload a file."

_CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

logger = get_logger("impactlens.diagnostic")


def extract_json(text: str) -> dict:
    """
    Parse the model's response text as a JSON object.

    A surrounding markdown code fence is tolerated; anything else must be
    plain JSON.

    Raises:
        MalformedResponseError: If the text is not a JSON object
    """
    stripped = text.strip()
    match = _CODE_FENCE_PATTERN.match(stripped)
    if match:
        stripped = match.group(1)

    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as e:
        preview = stripped[:200] + "..." if len(stripped) > 200 else stripped
        raise MalformedResponseError(
            f"Model response is not valid JSON ({e.msg} at line {e.lineno}, column {e.colno}): {preview}"
        ) from e

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Model response must be a JSON object, got {type(data).__name__}"
        )
    return data


class DiagnosticClient:
    """Produces a validated AntiPortfolioData from form inputs, or raises a DiagnosticError."""

    def __init__(self, llm_client: LLMClientBase, assembler: Optional[PromptAssembler] = None):
        """
        Initialize diagnostic client.

        Args:
            llm_client: Model client performing the outbound call
            assembler: Prompt assembler (defaults to English, current prompt version)
        """
        self.llm_client = llm_client
        self.assembler = assembler or PromptAssembler()

    @staticmethod
    def check_inputs(inputs: DiagnosticInputs, attachments: Sequence[Attachment]) -> None:
        """Reject a request with no text in any section and no attachments."""
        if not inputs.has_content() and not attachments:
            raise InputValidationError(EMPTY_INPUT_MESSAGE)

    def generate(
        self,
        inputs: DiagnosticInputs,
        viewer: ViewerType,
        attachments: Sequence[Attachment] = (),
    ) -> AntiPortfolioData:
        """
        Generate a diagnostic report.

        Args:
            inputs: The seven input sections
            viewer: Selected viewer lens
            attachments: Attached files, in display order

        Returns:
            Validated AntiPortfolioData

        Raises:
            InputValidationError: If there is nothing to analyze
            TransportError: If the model call fails
            EmptyResponseError: If the model returns no text
            MalformedResponseError: If the response is not a JSON object
            SchemaMismatchError: If the JSON does not match the report schema
        """
        self.check_inputs(inputs, attachments)

        prompt = self.assembler.assemble(inputs, viewer, attachments)
        logger.log_stage(
            "model_call",
            "started",
            viewer=prompt.viewer.value,
            prompt_length=len(prompt.text),
            attachments=len(prompt.attachments),
        )

        start_time = time.time()
        try:
            raw_text = self.llm_client.generate(
                prompt.text,
                system_instruction=prompt.system_instruction,
                attachments=prompt.attachments,
                response_schema=prompt.response_schema,
            )
            report = self.parse_response(raw_text)
        except DiagnosticError as e:
            logger.log_stage(
                "model_call",
                "failed",
                duration_ms=(time.time() - start_time) * 1000,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        logger.log_stage(
            "model_call",
            "completed",
            duration_ms=(time.time() - start_time) * 1000,
            headline=report.headline,
        )
        return report

    @staticmethod
    def parse_response(text: str) -> AntiPortfolioData:
        """Parse and validate raw model output."""
        return validate_report(extract_json(text))
