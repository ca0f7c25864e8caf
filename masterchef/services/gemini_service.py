"""
Gemini LLM service for recipe generation.

- Exactly one generate_content call per request; no automatic retry.
- The call runs on the async client under an explicit timeout. Cancelling the
  awaiting task abandons the upstream request.
- Output is returned verbatim (markdown); only empty/missing text is rejected.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from masterchef.config import settings
from masterchef.utils.exceptions import Unconfigured, UpstreamFailure

logger = logging.getLogger(__name__)


class GeminiService:
    """Service for interacting with Gemini API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.max_output_tokens = max_output_tokens or settings.gemini_max_tokens
        self.temperature = settings.gemini_temperature if temperature is None else temperature
        self.timeout = timeout or settings.generation_timeout
        self._client: Optional[genai.Client] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def client(self) -> genai.Client:
        """Get or create Gemini client (lazy initialization)."""
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate_text(self, *, system_instruction: str, user_message: str) -> str:
        """
        Single Gemini call returning the model's raw text.

        Raises:
            Unconfigured: If no API key is set (checked before any network I/O)
            UpstreamFailure: On API error, timeout, or empty/malformed payload
        """
        if not self.is_configured:
            raise Unconfigured("Recipe generation is not configured on this server")

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            max_output_tokens=self.max_output_tokens,
            temperature=self.temperature,
        )

        try:
            resp = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=user_message,
                    config=config,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error("Gemini call timed out after %.1fs (model=%s)", self.timeout, self.model)
            raise UpstreamFailure(
                f"Recipe generation took too long (> {self.timeout:.0f}s). Please try again."
            ) from e
        except Exception as e:
            logger.error("Gemini call failed: %s", str(e), exc_info=True)
            raise UpstreamFailure("Failed to generate recipe. Please try again.") from e

        return self._extract_text(resp)

    def _extract_text(self, resp: Any) -> str:
        try:
            text = resp.text
        except Exception as e:
            # Blocked or malformed candidates surface as accessor errors in some SDK versions
            logger.error("Gemini response had no readable text: %s", str(e))
            raise UpstreamFailure("The model returned a malformed response. Please try again.") from e

        if not isinstance(text, str) or not text.strip():
            finish_reason = None
            candidates = getattr(resp, "candidates", None)
            if candidates:
                finish_reason = getattr(candidates[0], "finish_reason", None)
            logger.error("Gemini returned empty text (finish_reason=%s)", finish_reason)
            raise UpstreamFailure("The model returned an empty response. Please try again.")

        return text
