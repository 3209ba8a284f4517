"""Analyzer configuration from environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_RENDER_BATCH_SIZE = 100


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    return value if value else default


def _optional_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


@dataclass(frozen=True, slots=True)
class JvmLensConfig:
    snapshot_dir: str = "appdata/snapshots"
    export_dir: str = "appdata/reports"
    render_batch_size: int = DEFAULT_RENDER_BATCH_SIZE
    log_level: str = "INFO"
    log_format: str = "text"  # text|json
    log_file: str | None = None


def resolve_log_level_name(default: str = "INFO") -> str:
    """Resolve log level with the package-prefixed override taking precedence."""
    value = os.getenv("JVMLENS_LOG_LEVEL")
    if value is None:
        value = os.getenv("LOG_LEVEL", default)
    return value.strip().upper() or default


def load_config() -> JvmLensConfig:
    log_format = _str("JVMLENS_LOG_FORMAT", "text").lower()
    if log_format not in {"text", "json"}:
        log_format = "text"
    return JvmLensConfig(
        snapshot_dir=_str("JVMLENS_SNAPSHOT_DIR", "appdata/snapshots"),
        export_dir=_str("JVMLENS_EXPORT_DIR", "appdata/reports"),
        render_batch_size=max(1, _int("JVMLENS_RENDER_BATCH_SIZE", DEFAULT_RENDER_BATCH_SIZE)),
        log_level=resolve_log_level_name(default="INFO"),
        log_format=log_format,
        log_file=_optional_str("JVMLENS_LOG_FILE"),
    )


def resolve_snapshot_dir(config: JvmLensConfig) -> Path:
    return Path(config.snapshot_dir)


def resolve_export_dir(config: JvmLensConfig) -> Path:
    return Path(config.export_dir)
