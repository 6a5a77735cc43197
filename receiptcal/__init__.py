"""Receipt-themed calendar: date barcodes, receipt scanning and expenses."""

from .barcode import BarDescriptor, generate_barcode, render_svg
from .config import AppConfig, load_config
from .errors import ParseError, ReceiptCalError, UpstreamError, ValidationError
from .extraction import extract_receipt, infer_media_type, parse_reply
from .vision import ExtractionRequest, VisionBackend, create_backend

__all__ = [
    "BarDescriptor",
    "generate_barcode",
    "render_svg",
    "AppConfig",
    "load_config",
    "ReceiptCalError",
    "ValidationError",
    "UpstreamError",
    "ParseError",
    "extract_receipt",
    "infer_media_type",
    "parse_reply",
    "ExtractionRequest",
    "VisionBackend",
    "create_backend",
]
