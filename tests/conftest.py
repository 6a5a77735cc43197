"""Shared fixtures."""

import pytest

from receiptcal.vision import ExtractionRequest, VisionBackend


class FakeBackend(VisionBackend):
    """Records calls and replies with canned text."""

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[ExtractionRequest, str]] = []

    async def complete(self, request: ExtractionRequest, prompt: str) -> str:
        self.calls.append((request, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def make_backend():
    return FakeBackend
