"""Google AI Gemini client for structured diagnostic generation."""

import base64
import binascii
import time
from typing import Optional, Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from impactlens.core.config import API_KEY_ENV_VARS, DEFAULT_MODEL, DEFAULT_TEMPERATURE
from impactlens.core.errors import EmptyResponseError, InputValidationError, TransportError
from impactlens.core.logging import get_logger
from impactlens.schemas.inputs import Attachment

# Google AI Studio URL for getting API keys
GOOGLE_AI_STUDIO_URL = "https://aistudio.google.com/app/apikey"

logger = get_logger("impactlens.gemini")


class GeminiClient:
    """Client for one-shot structured generation against the Gemini API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key
            model: Model name to use (default: gemini-2.5-flash)
            temperature: Sampling temperature (default: 0.7)
        """
        if not api_key:
            raise ValueError(
                f"A Gemini API key is required. Set {' or '.join(API_KEY_ENV_VARS)} "
                f"or pass --api-key. Get a key from: {GOOGLE_AI_STUDIO_URL}"
            )

        # Keys pasted from shell exports often keep their quotes
        self.api_key = api_key.strip().strip('"').strip("'")
        if not self.api_key:
            raise ValueError(
                f"The Gemini API key cannot be empty. Get a key from: {GOOGLE_AI_STUDIO_URL}"
            )

        self.model = model or DEFAULT_MODEL
        self.temperature = temperature
        self.client = genai.Client(api_key=self.api_key)

    def _build_parts(self, prompt: str, attachments: Sequence[Attachment]) -> list[types.Part]:
        """Text part first, then one inline binary part per attachment, in order."""
        parts = [types.Part.from_text(text=prompt)]
        for attachment in attachments:
            try:
                payload = base64.b64decode(attachment.data, validate=True)
            except (binascii.Error, ValueError) as e:
                raise InputValidationError(
                    f"Attachment '{attachment.name}' is not valid base64 data"
                ) from e
            parts.append(types.Part.from_bytes(data=payload, mime_type=attachment.mime_type))
        return parts

    def _build_config(
        self, system_instruction: str, response_schema: Optional[dict]
    ) -> types.GenerateContentConfig:
        config_params = {
            "system_instruction": system_instruction,
            "response_mime_type": "application/json",
            "temperature": self.temperature,
        }
        if response_schema is not None:
            config_params["response_schema"] = response_schema
        return types.GenerateContentConfig(**config_params)

    @staticmethod
    def _extract_response_text(response) -> str:
        """Extract text from the response, checking candidate parts when ``text`` is empty."""
        if not response:
            return ""

        text = getattr(response, "text", None)
        if text:
            return str(text).strip()

        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                part_text = getattr(part, "text", None)
                if part_text and str(part_text).strip():
                    return str(part_text).strip()

        return ""

    def generate(
        self,
        prompt: str,
        system_instruction: str,
        attachments: Sequence[Attachment] = (),
        response_schema: Optional[dict] = None,
    ) -> str:
        """
        Run one structured generation request.

        Args:
            prompt: Per-request prompt text
            system_instruction: Static instruction sent on the system channel
            attachments: Files sent as inline binary parts after the text
            response_schema: Structural constraint on the generated JSON

        Returns:
            Raw JSON text returned by the model

        Raises:
            TransportError: If the API call fails
            EmptyResponseError: If the API returns no text
        """
        parts = self._build_parts(prompt, attachments)
        config = self._build_config(system_instruction, response_schema)

        start_time = time.time()
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=parts,
                config=config,
            )
        except genai_errors.APIError as e:
            raise TransportError(self._describe_api_error(e)) from e
        except Exception as e:
            raise TransportError(f"Gemini API request failed: {e}") from e
        latency_ms = (time.time() - start_time) * 1000

        text = self._extract_response_text(response)
        if not text:
            raise EmptyResponseError(f"No text returned from Gemini (model: {self.model})")

        usage = getattr(response, "usage_metadata", None)
        logger.log_llm_call(
            model=self.model,
            prompt=prompt,
            response=text,
            tokens_input=getattr(usage, "prompt_token_count", None),
            tokens_output=getattr(usage, "candidates_token_count", None),
            latency_ms=latency_ms,
            attachments=len(attachments),
        )
        return text

    def _describe_api_error(self, error: genai_errors.APIError) -> str:
        """Turn an API error into one actionable message."""
        code = getattr(error, "code", None)
        message = getattr(error, "message", None) or str(error)

        if code in (401, 403):
            return (
                f"Gemini API authentication failed ({code}). Check your API key: "
                f"{GOOGLE_AI_STUDIO_URL}. Original error: {message}"
            )
        if code == 429:
            return (
                "Gemini API rate limit or quota exceeded. Wait before generating again. "
                f"Original error: {message}"
            )
        if code == 404:
            return f"Gemini model '{self.model}' not found (404). Original error: {message}"
        return f"Gemini API error ({code}): {message}"
