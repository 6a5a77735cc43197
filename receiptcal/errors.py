"""Exceptions raised by the receipt extraction service."""

from __future__ import annotations


class ReceiptCalError(Exception):
    """Base class for receipt calendar errors."""


class ValidationError(ReceiptCalError):
    """The request did not carry an image payload."""

    def __init__(self, message: str = "No image provided") -> None:
        super().__init__(message)


class UpstreamError(ReceiptCalError):
    """The vision provider failed, timed out or returned a non-success status."""

    def __init__(self, message: str = "Failed to extract receipt data") -> None:
        super().__init__(message)


class ParseError(ReceiptCalError):
    """The provider's reply could not be read as a receipt JSON object."""

    def __init__(self, message: str = "Could not parse receipt data") -> None:
        super().__init__(message)
