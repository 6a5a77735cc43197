"""Gemini API vision backend for receipt extraction."""

from __future__ import annotations

import base64
import binascii
import logging

from ..errors import UpstreamError, ValidationError
from . import ExtractionRequest, VisionBackend

logger = logging.getLogger(__name__)


class GeminiVisionBackend(VisionBackend):
    """Read receipt images using Google Gemini's vision capability."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-2.0-flash",
        timeout: float = 60.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout

    async def complete(self, request: ExtractionRequest, prompt: str) -> str:
        if not self._api_key:
            raise UpstreamError(
                "Gemini API key is not configured. "
                "Set it in the config file or GEMINI_API_KEY."
            )

        try:
            import google.generativeai as genai
            from google.api_core import exceptions as google_exceptions
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: "
                "pip install 'receiptcal[gemini]'"
            ) from None

        # Gemini takes raw bytes rather than base64 text
        try:
            data = base64.b64decode(request.image_data)
        except binascii.Error as e:
            raise ValidationError("Image payload is not valid base64") from e

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)
        parts = [{"mime_type": request.media_type, "data": data}, prompt]

        logger.debug("Sending %s receipt to %s", request.media_type, self._model)
        try:
            response = await model.generate_content_async(
                parts, request_options={"timeout": self._timeout}
            )
            return response.text
        except google_exceptions.GoogleAPIError as e:
            logger.error("Gemini request failed: %s", e)
            raise UpstreamError(getattr(e, "message", None) or str(e)) from e
        except ValueError as e:
            # response.text raises when the reply was blocked or empty
            raise UpstreamError("Vision provider returned an empty reply") from e
