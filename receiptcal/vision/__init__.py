"""Vision backend base class, request type, and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import AppConfig


@dataclass(frozen=True)
class ExtractionRequest:
    image_data: str  # base64 payload, data-URI prefix already removed
    media_type: str = "image/jpeg"


class VisionBackend(ABC):
    """Abstract base for a hosted vision-language model."""

    @abstractmethod
    async def complete(self, request: ExtractionRequest, prompt: str) -> str:
        """Send one image plus instruction and return the model's text reply.

        Implementations make exactly one outbound call and raise
        :class:`~receiptcal.errors.UpstreamError` when it fails.
        """
        ...


def create_backend(config: AppConfig) -> VisionBackend:
    """Create a vision backend based on configuration."""
    backend_name = config.vision.backend

    match backend_name:
        case "claude":
            from .claude import ClaudeVisionBackend

            return ClaudeVisionBackend(
                api_key=config.vision.claude.api_key,
                model=config.vision.claude.model,
                max_tokens=config.vision.claude.max_tokens,
                timeout=config.vision.timeout,
            )
        case "gemini":
            from .gemini import GeminiVisionBackend

            return GeminiVisionBackend(
                api_key=config.vision.gemini.api_key,
                model=config.vision.gemini.model,
                timeout=config.vision.timeout,
            )
        case _:
            raise ValueError(
                f"Unknown vision backend: {backend_name!r} "
                f"(choose claude or gemini)"
            )
