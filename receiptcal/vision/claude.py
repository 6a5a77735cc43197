"""Claude API vision backend for receipt extraction."""

from __future__ import annotations

import logging

from ..errors import UpstreamError
from . import ExtractionRequest, VisionBackend

logger = logging.getLogger(__name__)


class ClaudeVisionBackend(VisionBackend):
    """Read receipt images using Claude's vision capability."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 1024,
        timeout: float = 60.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._timeout = timeout

    async def complete(self, request: ExtractionRequest, prompt: str) -> str:
        if not self._api_key:
            raise UpstreamError(
                "Anthropic API key is not configured. "
                "Set it in the config file or ANTHROPIC_API_KEY."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": request.media_type,
                    "data": request.image_data,
                },
            },
            {"type": "text", "text": prompt},
        ]

        client = anthropic.AsyncAnthropic(
            api_key=self._api_key, timeout=self._timeout, max_retries=0
        )
        logger.debug("Sending %s receipt to %s", request.media_type, self._model)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as e:
            logger.error("Claude request failed: %s", e)
            raise UpstreamError(getattr(e, "message", None) or str(e)) from e

        if not response.content:
            raise UpstreamError("Vision provider returned an empty reply")
        return response.content[0].text
