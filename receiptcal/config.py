"""TOML configuration loader for the receipt calendar."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class ClaudeVisionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1024


@dataclass
class GeminiVisionConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class VisionConfig:
    backend: str = "claude"
    timeout: float = 60.0
    claude: ClaudeVisionConfig = field(default_factory=ClaudeVisionConfig)
    gemini: GeminiVisionConfig = field(default_factory=GeminiVisionConfig)


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    max_body_bytes: int = 10 * 1024 * 1024


@dataclass
class StorageConfig:
    db_path: str = "~/.config/receiptcal/expenses.db"


@dataclass
class AppConfig:
    vision: VisionConfig = field(default_factory=VisionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    vis = raw.get("vision", {})
    srv = raw.get("server", {})
    sto = raw.get("storage", {})

    claude_cfg = vis.get("claude", {})
    gemini_cfg = vis.get("gemini", {})

    # Config file wins; environment fills empty keys
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )

    return AppConfig(
        vision=VisionConfig(
            backend=vis.get("backend", "claude"),
            timeout=float(vis.get("timeout", 60.0)),
            claude=ClaudeVisionConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-20250514"),
                max_tokens=claude_cfg.get("max_tokens", 1024),
            ),
            gemini=GeminiVisionConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
        ),
        server=ServerConfig(
            host=srv.get("host", "0.0.0.0"),
            port=srv.get("port", 3001),
            cors_origins=srv.get("cors_origins", ["*"]),
            max_body_bytes=srv.get("max_body_bytes", 10 * 1024 * 1024),
        ),
        storage=StorageConfig(
            db_path=sto.get("db_path", "~/.config/receiptcal/expenses.db"),
        ),
    )
