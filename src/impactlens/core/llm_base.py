"""Interface for generative model clients."""

from typing import Protocol, Sequence

from impactlens.schemas.inputs import Attachment


class LLMClientBase(Protocol):
    """
    Protocol for clients that run one structured generation call.

    Implementations perform exactly one request per call: no retry, no caching.
    """

    model: str

    def generate(
        self,
        prompt: str,
        system_instruction: str,
        attachments: Sequence[Attachment] = (),
        response_schema: dict | None = None,
    ) -> str:
        """
        Generate a structured JSON response.

        Args:
            prompt: Per-request prompt text
            system_instruction: Static instruction sent on the system channel
            attachments: Files sent as inline binary parts after the text
            response_schema: Structural constraint on the generated JSON

        Returns:
            Raw response text

        Raises:
            TransportError: If the call fails
            EmptyResponseError: If the call returns no text
        """
        ...
