"""Turn a photographed receipt into store name, date and line items."""

from __future__ import annotations

import json
import logging
import math
import re

from .errors import ParseError, ValidationError
from .vision import ExtractionRequest, VisionBackend

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """\
Analyze this receipt image and extract the following information in JSON format:
{
  "storeName": "name of the store/restaurant",
  "date": "YYYY-MM-DD format if visible, otherwise null",
  "items": [
    { "name": "item name", "price": "price as number (e.g., 12.99)" }
  ]
}

Rules:
- Extract all line items with their prices
- Use the exact item names as shown on the receipt
- Prices should be numbers only, no currency symbols
- If date is not visible, set to null
- If store name is not clear, make your best guess
- Only return the JSON, no other text"""

_DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")
# Greedy: first "{" through last "}"
_EMBEDDED_OBJECT = re.compile(r"\{[\s\S]*\}")


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant: {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {literal}")
    return value


def _loads(text: str):
    # JSON proper has no NaN or Infinity
    return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)


def strip_data_uri(image: str) -> str:
    """Drop a ``data:image/...;base64,`` prefix, keeping the raw payload."""
    return _DATA_URI_PREFIX.sub("", image, count=1)


def infer_media_type(image: str) -> str:
    if image.startswith("data:image/png"):
        return "image/png"
    if image.startswith("data:image/webp"):
        return "image/webp"
    return "image/jpeg"


def build_request(image: str | None) -> ExtractionRequest:
    """Validate the caller's payload and split it into data and media type.

    Raises:
        ValidationError: If no image payload was supplied.
    """
    if not image:
        raise ValidationError()
    if not isinstance(image, str):
        raise ValidationError("Image must be a base64 string")
    return ExtractionRequest(
        image_data=strip_data_uri(image),
        media_type=infer_media_type(image),
    )


def parse_reply(text: str) -> dict:
    """Parse the model's reply into a receipt object.

    Tries the whole reply as JSON first, then the outermost ``{...}``
    span inside it.

    Raises:
        ParseError: If neither attempt yields a JSON object.
    """
    try:
        data = _loads(text)
    except ValueError:
        data = None

    if isinstance(data, dict):
        return data

    match = _EMBEDDED_OBJECT.search(text)
    if match is None:
        raise ParseError()
    try:
        data = _loads(match.group(0))
    except ValueError as e:
        raise ParseError() from e
    if not isinstance(data, dict):
        raise ParseError()
    logger.debug("Recovered receipt JSON embedded in prose")
    return data


async def extract_receipt(image: str | None, backend: VisionBackend) -> dict:
    """Extract a receipt from a base64 or data-URI image.

    Makes exactly one call to ``backend``. The returned dict is the model's
    JSON verbatim: ``storeName``, ``date`` and ``items``.

    Raises:
        ValidationError: No image supplied; the backend is not called.
        UpstreamError: The vision provider failed.
        ParseError: The reply held no JSON object.
    """
    request = build_request(image)
    logger.info("Extracting receipt (%s, %d bytes base64)",
                request.media_type, len(request.image_data))
    reply = await backend.complete(request, EXTRACTION_PROMPT)
    extraction = parse_reply(reply)
    items = extraction.get("items")
    logger.info("Extracted %d items from %r",
                len(items) if isinstance(items, list) else 0,
                extraction.get("storeName"))
    return extraction
